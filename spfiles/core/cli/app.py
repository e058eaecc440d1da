"""spfiles CLI entry point."""

import typer

from spfiles import __version__
from spfiles.core.cli.profile_commands import profile_app
from spfiles.core.cli.upload_command import run as upload

app = typer.Typer(add_completion=False, help="spfiles command line interface.")


def _version_callback(value: bool) -> bool:
    if value:
        typer.echo(__version__)
        raise typer.Exit()
    return value


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show the spfiles version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Handle global CLI option for --version."""
    return None


app.command("upload")(upload)
app.add_typer(profile_app, name="profile")


def main() -> None:
    """Run the CLI."""
    app()


if __name__ == "__main__":
    main()
