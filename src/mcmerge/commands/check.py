import sys
from pathlib import Path

import typer

from mcmerge.codec import load_history
from mcmerge.exceptions import HistoryFormatError
from mcmerge.sorter import first_out_of_order


def check_file(path: Path) -> bool:
    """Decodes one history file and reports whether its entries are in order."""
    try:
        records = load_history(path)
    except HistoryFormatError as e:
        typer.secho(f"Error: {e.message}", err=True, fg=typer.colors.RED)
        return False
    except OSError as e:
        typer.secho(f"Error: {path}: {e.strerror or e}", err=True, fg=typer.colors.RED)
        return False

    position = first_out_of_order(records)
    if position is None:
        print(f"{path}: {len(records)} entries in chronological order")
        return True

    print(
        f"{path}: entry {position} ({records[position].timestamp}) is older than "
        + f"entry {position - 1} ({records[position - 1].timestamp})",
        file=sys.stderr,
    )
    return False


def check(file_paths: list[Path]) -> None:
    results = [check_file(path) for path in file_paths]
    if not all(results):
        raise typer.Exit(code=1)
