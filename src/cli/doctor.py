"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.wowza_client import WowzaClient
from cli.ui_components import print_banner
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.errors import MediaServerError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """List stream files of the default application as a reachability + auth probe."""

    try:
        async with WowzaClient(settings) as client:
            response = await client.get_stream_files_list()
    except MediaServerError as exc:
        return False, str(exc)
    if response.ok:
        return True, f"HTTP {response.status_code}"
    return False, response.errors[0].message


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)

    table = Table(title="WOWZA-D2 Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Endpoint", "OK", f"{settings.scheme}://{settings.host}:{settings.port}")
    if settings.username:
        table.add_row("Credentials", "OK", f"digest user '{settings.username}'")
    else:
        table.add_row("Credentials", "MISSING", "No username set -> requests are sent unauthenticated")
    table.add_row(
        "Defaults",
        "OK",
        f"application={settings.application} stream={settings.stream_file} "
        f"instance={settings.app_instance} caster={settings.media_caster_type}",
    )
    table.add_row("User config", "OK" if get_user_env_file().exists() else "NONE", str(get_user_env_file()))

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("REST API", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] run `doctor setup` to store host and credentials, "
            "or set WOWZA_D2_* environment variables."
        )
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive connection setup (stores config in the user config .env)."""

    defaults = AppSettings()

    host = typer.prompt("Wowza host", default=defaults.host, show_default=True).strip()
    port = typer.prompt("REST API port", default=defaults.port, show_default=True, type=int)
    username = typer.prompt("Username", default=defaults.username, show_default=True).strip()
    password = typer.prompt("Password", hide_input=True, confirmation_prompt=False).strip()
    application = typer.prompt("Default application", default=defaults.application, show_default=True).strip()

    if not host:
        raise typer.BadParameter("host is required")

    env_path = write_user_env_vars(
        {
            "WOWZA_D2_HOST": host,
            "WOWZA_D2_PORT": str(port),
            "WOWZA_D2_USERNAME": username,
            "WOWZA_D2_PASSWORD": password,
            "WOWZA_D2_APPLICATION": application or None,
        }
    )

    _console.print(f"[green]Saved connection config to:[/green] {env_path}")
