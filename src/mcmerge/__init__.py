"""Merge mcabber chat-history files and directories."""
