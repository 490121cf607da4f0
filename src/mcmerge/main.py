from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from sys import exit
from typing import Annotated, Any, final

import typer
from typer.core import TyperGroup
from typing_extensions import override

from mcmerge.exceptions import McMergeError


@final
class McMergeGroup(TyperGroup):
    @override
    def main(  # pyright: ignore[reportAny]
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        windows_expand_args: bool = True,
        **extra: Any,  # pyright: ignore[reportAny, reportExplicitAny]
    ) -> Any:  # pyright: ignore[reportExplicitAny]
        try:
            return super().main(args, prog_name, complete_var, standalone_mode, windows_expand_args, **extra)  #  pyright: ignore[reportAny]
        except McMergeError as e:
            typer.secho(f"Error: {e.message}", err=True, fg=typer.colors.RED)
            exit(e.exit_code)
        except Exception as e:
            typer.secho("Unexpected Internal Error", err=True, fg=typer.colors.RED)
            typer.echo(str(e), err=True)
            exit(1)


app = typer.Typer(cls=McMergeGroup, no_args_is_help=True, help="Merge mcabber history files and directories.")


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(f"mcmerge {version('mcmerge')}")
    except PackageNotFoundError:
        typer.echo("mcmerge (not installed)")
    raise typer.Exit()


@app.callback()
def main(
    show_version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Display the version and exit.",
        ),
    ] = False,
) -> None:
    pass


@app.command("merge")
def merge(
    store_a: Annotated[Path, typer.Argument(help="First history file or directory (kept first on ties).")],
    store_b: Annotated[Path, typer.Argument(help="Second history file or directory.")],
    output: Annotated[
        Path | None,
        typer.Argument(
            help="Output file or directory. Use '-' to write a merged file to stdout. Omit with --inplace.",
        ),
    ] = None,
    inplace: Annotated[
        bool,
        typer.Option(
            "--inplace",
            "-i",
            help="Don't use an output path; merge the result into the first file or directory.",
        ),
    ] = False,
    parallel: Annotated[
        int | None,
        typer.Option(
            "--parallel",
            "-p",
            help="Merge this many files at a time. Defaults to $MCMERGE_PARALLEL, or one at a time.",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print a JSON report of the run to stdout.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only report failures.",
        ),
    ] = False,
) -> None:
    """
    Merge two history stores.

    Both stores must be files or both directories. Entries are written in
    chronological order; entries present in both stores are written once.

      mcmerge merge DIR DIR OUTPUT_DIR
      mcmerge merge FILE FILE OUTPUT_FILE
      mcmerge merge --inplace DIR DIR
    """
    from mcmerge.commands import merge

    merge.merge(store_a, store_b, output, inplace, parallel, json_output, quiet)


@app.command("check")
def check(
    file_paths: Annotated[
        list[Path],
        typer.Argument(help="History files to check."),
    ],
) -> None:
    """
    Check that history files parse and are in chronological order.
    """
    from mcmerge.commands import check

    check.check(file_paths)


if __name__ == "__main__":
    app()
