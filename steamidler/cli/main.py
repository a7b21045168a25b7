"""steam-idler CLI - Main commands."""
import asyncio
import base64
import logging
import time
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

app = typer.Typer(
    name="steam-idler",
    help="Keep a Steam account online and idling games",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def load_environment(env_file: Optional[Path]) -> None:
    """Load a .env file into the environment without overriding set values."""
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()


@app.command()
def run(
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Path to a .env file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Override LOG_LEVEL"),
):
    """Log on and idle until a fatal error occurs."""
    from steamidler import SteamIdler, IdlerConfig, IdlerException, setup_logging
    from steamidler.core.logging import DEFAULT_FORMAT, parse_level

    load_environment(env_file)

    try:
        config = IdlerConfig.from_env()
        level = parse_level(log_level or config.log_level)
    except (IdlerException, ValueError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        raise typer.Exit(1)

    logging.basicConfig(level=level, format=DEFAULT_FORMAT)
    setup_logging(level)

    idler = SteamIdler(config)
    try:
        run_async(idler.run())
    except IdlerException as e:
        logging.getLogger('steamidler').error(str(e))
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("[yellow]Stopped[/yellow]")


@app.command()
def code(
    secret: Optional[str] = typer.Option(None, "--secret", "-s", help="Base64 shared secret (defaults to SHARED_SECRET)"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Path to a .env file"),
):
    """Print the current Steam Guard code."""
    from steamidler import EnvironmentSecrets, InvalidSecretError
    from steamidler.core.guard import SteamGuardCodeGenerator, CODE_INTERVAL

    load_environment(env_file)

    if not secret:
        secret = EnvironmentSecrets().first('SHARED_SECRET', 'shared')
    if not secret:
        console.print("[red]No shared secret. Pass --secret or set SHARED_SECRET.[/red]")
        raise typer.Exit(1)

    now = time.time()
    try:
        value = SteamGuardCodeGenerator().generate(secret, now)
    except InvalidSecretError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    remaining = CODE_INTERVAL - int(now) % CODE_INTERVAL
    console.print(f"[green]{value}[/green] (valid for {remaining}s)")


@app.command("export-token")
def export_token(
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Sentry file (defaults to SENTRY_PATH)"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Path to a .env file"),
):
    """Print the saved sentry token as base64 for the SENTRY env var."""
    from steamidler import IdlerConfig, IdlerException

    load_environment(env_file)

    if path is None:
        try:
            path = IdlerConfig.from_env().token_path
        except IdlerException as e:
            console.print(f"[red]ERROR: {e}[/red]")
            raise typer.Exit(1)

    if not path.is_file():
        console.print(f"[red]No sentry file at {path}. Log on once with 'steam-idler run'.[/red]")
        raise typer.Exit(1)

    console.print(base64.b64encode(path.read_bytes()).decode('ascii'), soft_wrap=True)


def main():
    app()


if __name__ == "__main__":
    main()
