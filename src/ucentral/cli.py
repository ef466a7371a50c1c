"""
uCentral CLI.

Usage:
    ucentral -s sec.example.com:16001 listdevices
    ucentral getdevice aabbccddeeff interfaces reboot aabbccddeeff
    ucentral getfirmware edgecore_eap101 latest
    ucentral annotate aabbccddeeff "cold boot,field retest"
"""

from __future__ import annotations

from typing import Sequence

import click
from pydantic import ValidationError
from rich.console import Console

from ucentral.api.devices import DeviceClient
from ucentral.api.session import SessionManager
from ucentral.api.transport import Transport
from ucentral.config import UCentralSettings, configure_settings
from ucentral.dispatch import COMMAND_USAGE, CommandDispatcher, CommandFrame, parse_chain
from ucentral.exceptions import CommandInputError, FatalError, UCentralError
from ucentral.logging import get_logger, setup_logging

logger = get_logger(__name__)

err_console = Console(stderr=True)


def _commands_epilog() -> str:
    lines = ["\b", "Commands (chain as many as needed):"]
    for command, usage in COMMAND_USAGE.items():
        lines.append(f"  {command.value} {usage}")
    lines.append("")
    lines.append("\b")
    lines.append("INFO is one of: configuration, interfaces, capabilities,")
    lines.append("status, stats, logs, health")
    return "\n".join(lines)


def build_transport(settings: UCentralSettings) -> Transport:
    """HTTP transport for one run."""
    return Transport(settings)


def run_chain(settings: UCentralSettings, frames: Sequence[CommandFrame]) -> int:
    """
    Open a session, execute the frames, and release the session.

    Returns:
        Process exit code
    """
    transport = build_transport(settings)
    try:
        with SessionManager(settings, transport=transport) as session:
            CommandDispatcher(DeviceClient(session)).execute(frames)
    except FatalError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1
    except UCentralError as e:
        logger.error(str(e))
        return 1
    finally:
        transport.close()
    return 0


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_commands_epilog(),
)
@click.argument("commands", nargs=-1)
@click.option("--username", "-u", default=None, help="uCentral username")
@click.option("--password", "-p", default=None, help="uCentral password")
@click.option(
    "--sec", "-s", "security_endpoint", default=None,
    help="Security service host:port",
)
@click.option("--debug", is_flag=True, help="Log every request")
@click.option("--log-json", is_flag=True, help="Log as JSON lines")
@click.version_option(package_name="ucentral-cli")
@click.pass_context
def main(
    ctx: click.Context,
    commands: tuple[str, ...],
    username: str | None,
    password: str | None,
    security_endpoint: str | None,
    debug: bool,
    log_json: bool,
) -> None:
    """uCentral command-chain client.

    Logs in, runs COMMANDS in order, and logs out. Options fall back to
    UCENTRAL_* environment variables.
    """
    if not commands:
        click.echo(ctx.get_help())
        ctx.exit(0)

    overrides = {
        "username": username,
        "password": password,
        "security_endpoint": security_endpoint,
        "debug": debug or None,
        "log_json": log_json or None,
    }
    try:
        settings = configure_settings(
            **{k: v for k, v in overrides.items() if v is not None}
        )
    except ValidationError as e:
        err_console.print(f"[red]Invalid settings:[/red] {e}")
        raise SystemExit(1)

    setup_logging(settings.effective_log_level, json_output=settings.log_json)

    try:
        frames = parse_chain(commands)
    except CommandInputError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    raise SystemExit(run_chain(settings, frames))


if __name__ == "__main__":
    main()
