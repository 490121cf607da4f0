# pyright: standard

from typing import Any

import msgspec


def to_json(obj: object) -> bytes:
    """Encode an object to JSON bytes using msgspec."""
    return msgspec.json.encode(obj)


def to_dict(obj: object) -> dict[str, Any]:
    """Convert an object to a plain dictionary using msgspec."""
    match res := msgspec.to_builtins(obj):
        case dict():
            return res
        case _:
            raise TypeError(f"Expected dict from to_builtins, got {type(res)!r}")
