#!/usr/bin/env python3
"""
notehub launcher.

    python run.py                          serve the notes API and browser client
    python run.py --port 9000 --reload     serve with overrides
    python run.py --action health          check config, database and uploads
"""

import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notehub.backend.core.logging import get_logger, log_with_source, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health"]),
    default="server",
    show_default=True,
    help="Serve notes, or check that they can be served.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Listen address (overrides application.yaml and PLH_HOST).")
@click.option("--port", default=None, type=int, help="Listen port (overrides application.yaml and PLH_PORT).")
@click.option("--reload", is_flag=True, help="Restart the server when code changes.")
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """Run the notehub server or check its storage."""
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    if action == "server":
        run_server(logger, host, port, reload)
    else:
        check_health(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start uvicorn on the app factory's module-level app."""
    from notehub.backend.core.config import get_server_address

    configured_host, configured_port = get_server_address()
    server_host = host or configured_host
    server_port = port or configured_port

    log_with_source(
        logger, "cli", "info", "Starting server",
        host=server_host, port=server_port, reload=reload,
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notehub.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Serving notes at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _check_database() -> str:
    from notehub.backend.core.config import get_database_path
    from notehub.backend.core.utils import utc_now_seconds
    from notehub.backend.services.note_store import NoteStore

    with NoteStore.from_config() as store:
        store.ping()
        total = store.count()
        due = len(store.list_due(utc_now_seconds()))
    return f"{get_database_path()}: {total} notes, {due} due"


def _check_uploads() -> str:
    from notehub.backend.services.attachments import AttachmentStorage

    attachments = AttachmentStorage.from_config()
    attachments.check_writable()
    return f"{attachments.directory}, limit {attachments.max_bytes} bytes"


def _check_frontend() -> str:
    from notehub.backend.core.config import get_frontend_dir

    frontend_dir = get_frontend_dir()
    if frontend_dir is None:
        return "disabled"
    if not (frontend_dir / "index.html").is_file():
        raise FileNotFoundError(f"No index.html in {frontend_dir}")
    return str(frontend_dir)


def check_health(logger) -> None:
    """Run each storage check and exit 1 if any fails."""
    from notehub.backend.core.config import get_app_config

    checks = [
        ("Configuration", lambda: f"{get_app_config().application.name} {get_app_config().application.version}"),
        ("Note database", _check_database),
        ("Upload directory", _check_uploads),
        ("Browser client", _check_frontend),
    ]

    click.echo("notehub health\n" + "-" * 50)
    failed = 0
    for name, check in checks:
        try:
            detail = check()
        except Exception as e:
            failed += 1
            logger.error("Health check failed", extra={"check": name, "error": str(e)})
            click.echo(f"  {click.style('FAIL', fg='red')}  {name}: {e}")
        else:
            logger.debug("Health check passed", extra={"check": name})
            click.echo(f"  {click.style('PASS', fg='green')}  {name}: {detail}")
    click.echo("-" * 50)

    if failed:
        click.echo(click.style(f"{failed} of {len(checks)} checks failed", fg="yellow"))
        sys.exit(1)
    click.echo(click.style("All checks passed", fg="green"))


if __name__ == "__main__":
    main()
