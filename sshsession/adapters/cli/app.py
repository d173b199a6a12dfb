"""
Main CLI application
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ...auth import AuthMethod
from ...client import RemoteSession, fetch_host_fingerprint
from ...config import SessionConfig, resolve
from ...core.exceptions import SessionError
from ...core.interfaces import SSHTransport
from ...core.logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from ...core.utils import load_ssh_config
from ...transport import ParamikoTransport
from ..config.loader import ConfigLoader

logger = get_logger(__name__)
console = get_stdout_console()
err_console = get_stderr_console()

app = typer.Typer(
    name="sshsession",
    add_completion=False,
    help="Run file transfers and commands over a single SSH session",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@dataclass
class CLIState:
    options: Dict[str, Any] = field(default_factory=dict)


def make_transport() -> SSHTransport:
    return ParamikoTransport()


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="TOML file with session options",
    ),
    ssh_config: Optional[str] = typer.Option(
        None, "--ssh-config", help="Host alias to read from ~/.ssh/config",
    ),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Remote host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="SSH port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Remote user"),
    password: Optional[str] = typer.Option(None, "--password", help="Password (prompted if needed)"),
    key: Optional[Path] = typer.Option(None, "--key", "-i", help="Private key file"),
    pub_key: Optional[Path] = typer.Option(None, "--pub-key", help="Public key file"),
    passphrase: Optional[str] = typer.Option(None, "--passphrase", help="Private key passphrase"),
    fingerprint: Optional[str] = typer.Option(
        None, "--fingerprint", "-f", help="Expected host key fingerprint",
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Connect timeout in seconds"),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file path"),
):
    """
    sshsession - one SSH session per invocation

    Options are read from --ssh-config, then --config, then SSHSESSION_*
    environment variables, then the command line (highest priority).
    """
    setup_logging(level=log_level, log_file=log_file)

    cli_options: Dict[str, Any] = {
        "host": host,
        "port": port,
        "user": user,
        "password": password,
        "private_key": str(key) if key else None,
        "pub_key": str(pub_key) if pub_key else None,
        "passphrase": passphrase,
        "host_fingerprint": fingerprint,
        "timeout": timeout,
    }
    if key:
        cli_options["authentication_method"] = AuthMethod.KEY.value

    try:
        base = load_ssh_config(ssh_config) if ssh_config else {}
        loader = ConfigLoader()
        options = loader.merge_configs(base, loader.load(config_file, cli_options))
    except SessionError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    ctx.obj = CLIState(options=options)


def _resolve(ctx: typer.Context) -> SessionConfig:
    options = dict(ctx.obj.options)
    if not options.get("host"):
        options["host"] = typer.prompt("Enter remote host address")
    if not options.get("user"):
        options["user"] = typer.prompt("Enter SSH username", default="root")

    config = resolve({**options, "auto_connect": False})
    if config.authentication_method is AuthMethod.PASSWORD and config.password is None:
        options["password"] = typer.prompt(
            f"Password for {config.user}@{config.host}", hide_input=True
        )
        config = resolve({**options, "auto_connect": False})
    return config


def _open_session(ctx: typer.Context) -> RemoteSession:
    session = RemoteSession(_resolve(ctx), transport=make_transport())
    session.connect()
    return session


def _run(ctx: typer.Context, action) -> None:
    try:
        with _open_session(ctx) as session:
            action(session)
    except SessionError as e:
        err_console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def send(
    ctx: typer.Context,
    local_path: Path = typer.Argument(..., help="Local file"),
    remote_path: str = typer.Argument(..., help="Destination on the remote host"),
    mode: str = typer.Option("0644", "--mode", "-m", help="Octal permission bits"),
):
    """Send a local file to the remote host"""
    try:
        create_mode = int(mode, 8)
    except ValueError:
        raise typer.BadParameter(f"Not an octal mode: {mode}", param_hint="--mode")

    def action(session: RemoteSession) -> None:
        session.send_file(local_path, remote_path, create_mode)
        console.print(f"[green]✓[/green] {local_path} -> {remote_path}")

    _run(ctx, action)


@app.command()
def get(
    ctx: typer.Context,
    remote_path: str = typer.Argument(..., help="File on the remote host"),
    local_path: Path = typer.Argument(..., help="Local destination"),
):
    """Fetch a file from the remote host"""
    def action(session: RemoteSession) -> None:
        session.request_file(local_path, remote_path)
        console.print(f"[green]✓[/green] {remote_path} -> {local_path}")

    _run(ctx, action)


@app.command()
def mv(
    ctx: typer.Context,
    old_path: str = typer.Argument(...),
    new_path: str = typer.Argument(...),
):
    """Move a file on the remote host"""
    _run(ctx, lambda session: session.move_remote_file(old_path, new_path))


@app.command()
def cp(
    ctx: typer.Context,
    path: str = typer.Argument(...),
    copy_to: str = typer.Argument(...),
):
    """Copy a file on the remote host"""
    _run(ctx, lambda session: session.copy_remote_file(path, copy_to))


@app.command("exec")
def exec_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command line, sent unmodified"),
):
    """Run a command on the remote host"""
    exit_code = 0

    def action(session: RemoteSession) -> None:
        nonlocal exit_code
        result = session.execute(command)
        if result.stdout:
            console.out(result.stdout, end="")
        if result.stderr:
            err_console.out(result.stderr, end="")
        exit_code = result.exit_code

    _run(ctx, action)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command("fingerprint")
def show_fingerprint(ctx: typer.Context):
    """Print the host key fingerprint without authenticating"""
    options = dict(ctx.obj.options)
    if not options.get("host"):
        options["host"] = typer.prompt("Enter remote host address")
    try:
        value = fetch_host_fingerprint(resolve(options), make_transport())
    except SessionError as e:
        err_console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)
    console.out(value)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
