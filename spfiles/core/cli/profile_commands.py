"""``spfiles profile``: manage named site profiles."""

from typing import Optional

import typer

from spfiles.core.config import ProfileManager, SiteConfig
from spfiles.core.exceptions import ConfigError

profile_app = typer.Typer(help="Manage site profiles.", no_args_is_help=True)


def _abort(exc: Exception) -> typer.Exit:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    return typer.Exit(1)


@profile_app.command("list")
def list_profiles() -> None:
    """List the available profiles."""
    for name in ProfileManager().list_profiles():
        typer.echo(name)


@profile_app.command("create")
def create_profile(
    name: str = typer.Argument(..., help="Profile name."),
    site_url: str = typer.Option(..., "--site-url", help="Absolute site URL."),
    access_token: Optional[str] = typer.Option(
        None, "--access-token", help="Bearer token for the site."
    ),
    odata_mode: str = typer.Option(
        "verbose", "--odata-mode", help="verbose, minimalmetadata or nometadata."
    ),
    chunk_size: Optional[str] = typer.Option(
        None, "--chunk-size", help="Default upload chunk size, e.g. 10mb."
    ),
) -> None:
    """Create a new profile."""
    try:
        config = SiteConfig(
            site_url=site_url,
            access_token=access_token,
            odata_mode=odata_mode,
            chunk_size=chunk_size,
        )
        ProfileManager().create_profile(name, config)
    except (ConfigError, ValueError) as exc:
        raise _abort(exc)
    typer.echo(f"Created profile {name!r}.")


@profile_app.command("show")
def show_profile(name: str = typer.Argument(..., help="Profile name.")) -> None:
    """Print a profile, with the access token masked."""
    try:
        config = ProfileManager().get_profile(name)
    except ConfigError as exc:
        raise _abort(exc)
    if config.access_token:
        config = config.model_copy(update={"access_token": "***"})
    typer.echo(config.model_dump_json(indent=2))


@profile_app.command("delete")
def delete_profile(name: str = typer.Argument(..., help="Profile name.")) -> None:
    """Delete a profile."""
    try:
        ProfileManager().delete_profile(name)
    except ConfigError as exc:
        raise _abort(exc)
    typer.echo(f"Deleted profile {name!r}.")
