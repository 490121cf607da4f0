import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from tempfile import mkstemp
from typing import IO

from mcmerge.codec import ENCODING, ENCODING_ERRORS, NEWLINE

# Temp files live next to their target as ".<name>.tmp<random>" until renamed.
TEMP_PREFIX = "."
TEMP_MARKER = ".tmp"


def _temp_prefix(path: Path) -> str:
    return TEMP_PREFIX + path.name + TEMP_MARKER


def is_temp_name(name: str) -> bool:
    """True for names of temp files left behind by an interrupted write."""
    return name.startswith(TEMP_PREFIX) and TEMP_MARKER in name


@contextmanager
def atomic_output(path: Path) -> Iterator[IO[str]]:
    """
    Yields a text stream whose contents replace `path` only when the block exits cleanly.

    The data goes to a temp file next to `path` and is moved over it with os.replace,
    so `path` may also be one of the inputs being read. On error the temp file is
    removed and `path` is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = mkstemp(suffix=path.suffix, prefix=_temp_prefix(path), dir=path.parent)
    tmp_path = Path(tmp)
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline=NEWLINE) as f:
            yield f

        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def is_same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def copy_history_file(source: Path, dest: Path) -> bool:
    """
    Copies a history file byte for byte.

    Returns False without touching anything when source and dest are the same file.
    """
    if is_same_file(source, dest):
        return False

    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = mkstemp(suffix=dest.suffix, prefix=_temp_prefix(dest), dir=dest.parent)
    os.close(fd)
    tmp_path = Path(tmp)
    try:
        _ = shutil.copyfile(source, tmp_path)
        shutil.copymode(source, tmp_path)
        os.replace(tmp_path, dest)
    finally:
        tmp_path.unlink(missing_ok=True)
    return True
