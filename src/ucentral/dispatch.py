"""
Command-chain parsing and dispatch.

A chain is a flat list of tokens such as::

    getdevice aabbccddeeff configuration reboot 112233445566

Each command name is followed by its required arguments and then by up to two
optional tokens. An optional token is consumed only when it satisfies the
command's own predicate (an info keyword, ``latest``, an ``http`` URI, a
boolean literal); otherwise it is left for the next command.

Parsing happens up front, so input errors abort before any network call.
Remote failures during execution are logged and the chain continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from ucentral.cache import SessionCache
from ucentral.exceptions import CommandInputError, RemoteError
from ucentral.logging import get_logger
from ucentral.models.devices import DEVICE_INFO, SERIAL_LENGTH
from ucentral.models.firmware import DEVICE_TYPES
from ucentral.report import display_list

if TYPE_CHECKING:
    from ucentral.api.devices import DeviceClient

logger = get_logger(__name__)

Renderer = Callable[[str, list[str]], None]


class Command(str, Enum):
    """Commands understood in a chain."""

    LIST_DEVICES = "listdevices"
    GET_DEVICE = "getdevice"
    GET_FIRMWARE = "getfirmware"
    UPGRADE_FIRMWARE = "upgradefirmware"
    REBOOT = "reboot"
    ANNOTATE = "annotate"
    FACTORY = "factory"

    @classmethod
    def lookup(cls, token: str) -> Command | None:
        try:
            return cls(token.lower())
        except ValueError:
            return None


# Usage hints, in the order shown by ``--help``.
COMMAND_USAGE: dict[Command, str] = {
    Command.LIST_DEVICES: "[INFO]",
    Command.GET_DEVICE: "SERIAL [INFO]",
    Command.GET_FIRMWARE: "DEVICE_TYPE [latest]",
    Command.UPGRADE_FIRMWARE: "SERIAL [URI]",
    Command.REBOOT: "SERIAL",
    Command.ANNOTATE: "SERIAL 'NOTE[,NOTE...]'",
    Command.FACTORY: "SERIAL [true|false]",
}


@dataclass(frozen=True)
class CommandFrame:
    """One decoded command and the tokens it took from the chain."""

    name: Command
    required_arg: str | None = None
    optional_args: tuple[str, ...] = ()
    consumed: int = 1

    @property
    def option(self) -> str | None:
        return self.optional_args[0] if self.optional_args else None


class TokenCursor:
    """Read position over a token sequence."""

    def __init__(self, tokens: Sequence[str]) -> None:
        self._tokens = list(tokens)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._position

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._tokens)

    def peek(self, n: int = 0) -> str | None:
        """Token ``n`` places ahead of the current one, or None past the end."""
        index = self._position + n
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return None

    def advance(self, n: int = 1) -> None:
        if n < 1 or n > self.remaining:
            raise ValueError(f"cannot advance {n} with {self.remaining} tokens left")
        self._position += n


# =============================================================================
# Predicates
# =============================================================================


def is_info_keyword(token: str | None) -> bool:
    return token is not None and token.lower() in DEVICE_INFO


def is_latest_keyword(token: str | None) -> bool:
    return token is not None and token.lower() == "latest"


def is_uri(token: str | None) -> bool:
    return token is not None and token.startswith("http")


def is_bool_literal(token: str | None) -> bool:
    return token is not None and token.lower() in ("true", "false")


def split_notes(text: str) -> list[str]:
    """Comma-separated notes, blanks dropped."""
    return [part.strip() for part in text.split(",") if part.strip()]


# =============================================================================
# Frame decoders (cursor sits on the command name)
# =============================================================================


def _require(cursor: TokenCursor, offset: int, command: Command, what: str) -> str:
    token = cursor.peek(offset)
    if token is None:
        raise CommandInputError(command.value, f"must supply {what}")
    return token


def _require_serial(cursor: TokenCursor, command: Command) -> str:
    serial = _require(cursor, 1, command, "device SN").lower()
    if len(serial) != SERIAL_LENGTH:
        raise CommandInputError(command.value, f"{serial}: incorrect device SN length")
    return serial


def _decode_list_devices(cursor: TokenCursor, command: Command) -> CommandFrame:
    nxt = cursor.peek(1)
    if is_info_keyword(nxt):
        return CommandFrame(command, optional_args=(nxt.lower(),), consumed=2)
    return CommandFrame(command)


def _decode_get_device(cursor: TokenCursor, command: Command) -> CommandFrame:
    serial = _require_serial(cursor, command)
    nxt = cursor.peek(2)
    if is_info_keyword(nxt):
        return CommandFrame(command, serial, (nxt.lower(),), consumed=3)
    return CommandFrame(command, serial, consumed=2)


def _decode_get_firmware(cursor: TokenCursor, command: Command) -> CommandFrame:
    device_type = _require(cursor, 1, command, "device type").lower()
    nxt = cursor.peek(2)
    if is_latest_keyword(nxt):
        return CommandFrame(command, device_type, ("latest",), consumed=3)
    return CommandFrame(command, device_type, consumed=2)


def _decode_upgrade_firmware(cursor: TokenCursor, command: Command) -> CommandFrame:
    serial = _require_serial(cursor, command)
    nxt = cursor.peek(2)
    if is_uri(nxt):
        return CommandFrame(command, serial, (nxt,), consumed=3)
    return CommandFrame(command, serial, consumed=2)


def _decode_reboot(cursor: TokenCursor, command: Command) -> CommandFrame:
    return CommandFrame(command, _require_serial(cursor, command), consumed=2)


def _decode_annotate(cursor: TokenCursor, command: Command) -> CommandFrame:
    serial = _require_serial(cursor, command)
    notes = cursor.peek(2)
    if notes is None or not split_notes(notes):
        raise CommandInputError(command.value, "missing the notes")
    return CommandFrame(command, serial, (notes,), consumed=3)


def _decode_factory(cursor: TokenCursor, command: Command) -> CommandFrame:
    serial = _require_serial(cursor, command)
    nxt = cursor.peek(2)
    if is_bool_literal(nxt):
        return CommandFrame(command, serial, (nxt.lower(),), consumed=3)
    return CommandFrame(command, serial, consumed=2)


DECODERS: dict[Command, Callable[[TokenCursor, Command], CommandFrame]] = {
    Command.LIST_DEVICES: _decode_list_devices,
    Command.GET_DEVICE: _decode_get_device,
    Command.GET_FIRMWARE: _decode_get_firmware,
    Command.UPGRADE_FIRMWARE: _decode_upgrade_firmware,
    Command.REBOOT: _decode_reboot,
    Command.ANNOTATE: _decode_annotate,
    Command.FACTORY: _decode_factory,
}


def parse_chain(tokens: Iterable[str]) -> list[CommandFrame]:
    """
    Decode a token chain into frames.

    Unknown tokens are logged and skipped.

    Raises:
        CommandInputError: A command is missing a required argument or has
            a malformed serial
    """
    cursor = TokenCursor(list(tokens))
    frames: list[CommandFrame] = []
    while not cursor.at_end:
        token = cursor.peek()
        command = Command.lookup(token)
        if command is None:
            logger.warning(f"Unknown arg: {token}")
            cursor.advance()
            continue
        frame = DECODERS[command](cursor, command)
        frames.append(frame)
        cursor.advance(frame.consumed)
    return frames


# =============================================================================
# Dispatcher
# =============================================================================


class CommandDispatcher:
    """
    Executes command frames against a ``DeviceClient``.

    Example:
        >>> with SessionManager(settings) as session:
        ...     CommandDispatcher(DeviceClient(session)).run(
        ...         ["getdevice", "aabbccddeeff", "interfaces"]
        ...     )
    """

    def __init__(
        self,
        client: DeviceClient,
        cache: SessionCache | None = None,
        render: Renderer = display_list,
        known_device_types: Iterable[str] = DEVICE_TYPES,
    ) -> None:
        self._client = client
        self.cache = cache if cache is not None else SessionCache()
        self._render = render
        self._known_device_types = {t.lower() for t in known_device_types}
        self.executed: list[CommandFrame] = []
        self._handlers: dict[Command, Callable[[CommandFrame], None]] = {
            Command.LIST_DEVICES: self._list_devices,
            Command.GET_DEVICE: self._get_device,
            Command.GET_FIRMWARE: self._get_firmware,
            Command.UPGRADE_FIRMWARE: self._upgrade_firmware,
            Command.REBOOT: self._reboot,
            Command.ANNOTATE: self._annotate,
            Command.FACTORY: self._factory,
        }

    def run(self, tokens: Iterable[str]) -> None:
        """Parse and execute a token chain."""
        self.execute(parse_chain(tokens))

    def execute(self, frames: Iterable[CommandFrame]) -> None:
        """
        Execute frames in order.

        Remote failures are logged and skipped. ``FatalError`` propagates and
        ends the chain.
        """
        for frame in frames:
            self.executed.append(frame)
            try:
                self._handlers[frame.name](frame)
            except RemoteError as e:
                logger.error(f"{frame.name.value}: {e}")

    # =========================================================================
    # Handlers
    # =========================================================================

    def _list_devices(self, frame: CommandFrame) -> None:
        devices = self.cache.get_device_list()
        if devices is None:
            devices = self._client.list_devices()
            self.cache.put_device_list(devices)
        info = frame.option or ""
        for serial in devices.serial_numbers():
            self._render(serial, devices.info_by_serial(serial, info))

    def _get_device(self, frame: CommandFrame) -> None:
        serial = frame.required_arg
        device = self.cache.get_device(serial)
        if device is None:
            device = self._client.get_device(serial)
            self.cache.put_device(serial, device)
        self._render(device.serial_number or serial, device.list_info(frame.option or ""))

    def _get_firmware(self, frame: CommandFrame) -> None:
        device_type = frame.required_arg
        self._validate_device_type(device_type)
        if frame.option == "latest":
            firmware = self._client.get_latest_firmware_by_device(device_type)
            self._render(device_type, [firmware.generate_description()])
            return
        firmwares = self._client.get_firmware_list_by_device(device_type)
        self._render(device_type, firmwares.generate_list())

    def _validate_device_type(self, device_type: str) -> None:
        if device_type in self._known_device_types:
            return
        logger.info("Retrieving valid device types...")
        try:
            valid = self._client.list_firmware_device_types()
        except RemoteError as e:
            raise CommandInputError(
                Command.GET_FIRMWARE.value,
                f"{device_type}: cannot validate device type ({e})",
            ) from e
        if device_type in {t.lower() for t in valid}:
            self._known_device_types.add(device_type)
            return
        for name in valid:
            logger.info(f"\t{name}")
        raise CommandInputError(
            Command.GET_FIRMWARE.value, f"{device_type}: invalid device type supplied"
        )

    def _upgrade_firmware(self, frame: CommandFrame) -> None:
        record = self._client.get_firmware_device(frame.required_arg)
        if frame.option:
            self._client.upgrade_device_firmware(record.serial_number, frame.option)
            logger.info(f"{record.serial_number}: upgrade to {frame.option} requested")
            return
        latest = self._client.upgrade_device_to_latest(record)
        logger.info(f"{record.serial_number}: upgrade to {latest.revision} requested")

    def _reboot(self, frame: CommandFrame) -> None:
        self._client.reboot_device(frame.required_arg)
        logger.info(f"{frame.required_arg}: reboot requested")

    def _annotate(self, frame: CommandFrame) -> None:
        notes = split_notes(frame.option)
        self._client.add_notes_to_device(frame.required_arg, notes)
        logger.info(f"{frame.required_arg}: {len(notes)} note(s) added")

    def _factory(self, frame: CommandFrame) -> None:
        keep = frame.option != "false"
        self._client.factory_reset_device(frame.required_arg, keep_redirector=keep)
        logger.info(
            f"{frame.required_arg}: factory reset requested (keep redirector: {keep})"
        )


__all__ = [
    "Command",
    "COMMAND_USAGE",
    "CommandFrame",
    "TokenCursor",
    "CommandDispatcher",
    "parse_chain",
    "split_notes",
    "is_info_keyword",
    "is_latest_keyword",
    "is_uri",
    "is_bool_literal",
]
