"""Screenshots through xdg-desktop-portal over the D-Bus session bus."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import secrets
import struct
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from .types import (
    CaptureKind,
    CaptureType,
    DBusError,
    InvalidResponseError,
    PermissionDeniedError,
)

log = logging.getLogger(__name__)

PORTAL_SERVICE = "org.freedesktop.portal.Desktop"
PORTAL_PATH = "/org/freedesktop/portal/desktop"
SCREENSHOT_INTERFACE = "org.freedesktop.portal.Screenshot"
REQUEST_INTERFACE = "org.freedesktop.portal.Request"

_BUS_NAME = "org.freedesktop.DBus"
_BUS_PATH = "/org/freedesktop/DBus"
_RESPONSE_MATCH = f"type='signal',interface='{REQUEST_INTERFACE}',member='Response'"

_METHOD_CALL, _METHOD_RETURN, _ERROR, _SIGNAL = 1, 2, 3, 4
_F_PATH, _F_INTERFACE, _F_MEMBER, _F_ERROR_NAME = 1, 2, 3, 4
_F_REPLY_SERIAL, _F_DESTINATION, _F_SIGNATURE = 5, 6, 8

_ALIGN = {
    "y": 1, "b": 4, "n": 2, "q": 2, "i": 4, "u": 4, "x": 8, "t": 8, "d": 8,
    "h": 4, "s": 4, "o": 4, "g": 1, "v": 1, "a": 4, "(": 8, "{": 8,
}
_FIXED = {
    "y": "B", "b": "I", "n": "h", "q": "H", "i": "i", "u": "I",
    "x": "q", "t": "Q", "d": "d", "h": "I",
}


def _type_end(sig: str, start: int) -> int:
    code = sig[start]
    if code == "a":
        return _type_end(sig, start + 1)
    if code in "({":
        close = ")" if code == "(" else "}"
        pos = start + 1
        while sig[pos] != close:
            pos = _type_end(sig, pos)
        return pos + 1
    return start + 1


def _split(sig: str) -> Iterator[str]:
    pos = 0
    while pos < len(sig):
        end = _type_end(sig, pos)
        yield sig[pos:end]
        pos = end


class _Writer:
    """Little-endian D-Bus marshaller; variants are given as (signature, value)."""

    def __init__(self) -> None:
        self.buf = bytearray()

    def align(self, n: int) -> None:
        self.buf.extend(b"\0" * (-len(self.buf) % n))

    def write(self, sig: str, value: Any) -> None:
        code = sig[0]
        self.align(_ALIGN[code])
        if code in _FIXED:
            if code == "b":
                value = 1 if value else 0
            self.buf += struct.pack("<" + _FIXED[code], value)
        elif code in "so":
            raw = value.encode()
            self.buf += struct.pack("<I", len(raw)) + raw + b"\0"
        elif code == "g":
            raw = value.encode()
            self.buf += bytes([len(raw)]) + raw + b"\0"
        elif code == "v":
            inner, payload = value
            self.write("g", inner)
            self.write(inner, payload)
        elif code == "a":
            elem = sig[1:]
            length_at = len(self.buf)
            self.buf += b"\0\0\0\0"
            self.align(_ALIGN[elem[0]])
            start = len(self.buf)
            items = value.items() if elem[0] == "{" else value
            for item in items:
                self.write(elem, item)
            struct.pack_into("<I", self.buf, length_at, len(self.buf) - start)
        elif code in "({":
            for part, item in zip(_split(sig[1:-1]), value):
                self.write(part, item)
        else:
            raise DBusError(f"unsupported signature {sig!r}")


class _Reader:
    """D-Bus unmarshaller; variants come back as their plain value."""

    def __init__(self, data: bytes, endian: str = "<", pos: int = 0) -> None:
        self.data = data
        self.endian = endian
        self.pos = pos

    def _unpack(self, fmt: str) -> Any:
        fmt = self.endian + fmt
        (value,) = struct.unpack_from(fmt, self.data, self.pos)
        self.pos += struct.calcsize(fmt)
        return value

    def read(self, sig: str) -> Any:
        code = sig[0]
        self.pos += -self.pos % _ALIGN[code]
        if code in _FIXED:
            value = self._unpack(_FIXED[code])
            return bool(value) if code == "b" else value
        if code in "so":
            length = self._unpack("I")
            text = self.data[self.pos:self.pos + length].decode("utf-8", errors="replace")
            self.pos += length + 1
            return text
        if code == "g":
            length = self.data[self.pos]
            text = self.data[self.pos + 1:self.pos + 1 + length].decode()
            self.pos += length + 2
            return text
        if code == "v":
            return self.read(self.read("g"))
        if code == "a":
            length = self._unpack("I")
            elem = sig[1:]
            self.pos += -self.pos % _ALIGN[elem[0]]
            end = self.pos + length
            items = []
            while self.pos < end:
                items.append(self.read(elem))
            return dict(items) if elem[0] == "{" else items
        if code in "({":
            return tuple(self.read(part) for part in _split(sig[1:-1]))
        raise DBusError(f"unsupported signature {sig!r}")


@dataclass
class _Message:
    kind: int
    fields: dict[int, Any]
    body: tuple

    @property
    def path(self) -> str | None:
        return self.fields.get(_F_PATH)

    @property
    def interface(self) -> str | None:
        return self.fields.get(_F_INTERFACE)

    @property
    def member(self) -> str | None:
        return self.fields.get(_F_MEMBER)


def _socket_path(address: str) -> str:
    for entry in address.split(";"):
        transport, _, params = entry.partition(":")
        if transport != "unix":
            continue
        options = dict(p.split("=", 1) for p in params.split(",") if "=" in p)
        if "path" in options:
            return unquote(options["path"])
        if "abstract" in options:
            return "\0" + unquote(options["abstract"])
    raise DBusError(f"no supported transport in bus address {address!r}")


class _Bus:
    """A minimal session-bus connection for method calls and signals."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer = writer
        self._serial = 0
        self._signals: list[_Message] = []
        self.unique_name = ""

    async def authenticate(self) -> None:
        uid = str(os.getuid()).encode().hex().encode()
        self._writer.write(b"\0AUTH EXTERNAL " + uid + b"\r\n")
        await self._writer.drain()
        line = await self._reader.readline()
        if not line.startswith(b"OK"):
            raise DBusError(f"authentication rejected: {line!r}")
        self._writer.write(b"BEGIN\r\n")
        (self.unique_name,) = await self.call(_BUS_NAME, _BUS_PATH, _BUS_NAME, "Hello")

    def close(self) -> None:
        self._writer.close()

    def _send(self, fields: list, signature: str, body: tuple) -> int:
        self._serial += 1
        payload = _Writer()
        for part, value in zip(_split(signature), body):
            payload.write(part, value)
        if signature:
            fields = [*fields, (_F_SIGNATURE, ("g", signature))]
        head = _Writer()
        head.buf += struct.pack(
            "<BBBBII", ord("l"), _METHOD_CALL, 0, 1, len(payload.buf), self._serial
        )
        head.write("a(yv)", fields)
        head.align(8)
        self._writer.write(bytes(head.buf) + bytes(payload.buf))
        return self._serial

    async def _receive(self) -> _Message:
        try:
            fixed = await self._reader.readexactly(16)
            endian = "<" if fixed[:1] == b"l" else ">"
            body_len, _, fields_len = struct.unpack_from(endian + "III", fixed, 4)
            header_len = 16 + fields_len
            header_len += -header_len % 8
            data = fixed + await self._reader.readexactly(header_len - 16 + body_len)
        except (asyncio.IncompleteReadError, OSError) as err:
            raise DBusError("connection to the session bus closed") from err
        fields = dict(_Reader(data, endian, 12).read("a(yv)"))
        body_reader = _Reader(data[header_len:], endian)
        body = tuple(body_reader.read(p) for p in _split(fields.get(_F_SIGNATURE, "")))
        return _Message(fixed[1], fields, body)

    async def call(
        self,
        destination: str,
        path: str,
        interface: str,
        member: str,
        signature: str = "",
        body: tuple = (),
    ) -> tuple:
        fields = [
            (_F_PATH, ("o", path)),
            (_F_INTERFACE, ("s", interface)),
            (_F_MEMBER, ("s", member)),
            (_F_DESTINATION, ("s", destination)),
        ]
        serial = self._send(fields, signature, body)
        await self._writer.drain()
        while True:
            message = await self._receive()
            if message.kind == _SIGNAL:
                self._signals.append(message)
                continue
            if message.fields.get(_F_REPLY_SERIAL) != serial:
                continue
            if message.kind == _ERROR:
                name = message.fields.get(_F_ERROR_NAME, "")
                detail = message.body[0] if message.body and isinstance(message.body[0], str) else ""
                raise DBusError(f"{name}: {detail}")
            return message.body

    async def next_signal(self, interface: str, member: str, path: str) -> _Message:
        while True:
            for index, message in enumerate(self._signals):
                if (message.interface, message.member, message.path) == (interface, member, path):
                    return self._signals.pop(index)
            message = await self._receive()
            if message.kind == _SIGNAL:
                self._signals.append(message)


@contextlib.asynccontextmanager
async def _session_bus() -> AsyncIterator[_Bus]:
    address = os.environ.get("DBUS_SESSION_BUS_ADDRESS")
    if not address:
        raise DBusError("DBUS_SESSION_BUS_ADDRESS is not set")
    try:
        reader, writer = await asyncio.open_unix_connection(_socket_path(address))
    except OSError as err:
        raise DBusError(f"cannot connect to the session bus: {err}") from err
    bus = _Bus(reader, writer)
    try:
        await bus.authenticate()
        yield bus
    finally:
        bus.close()


def build_portal_options(capture_type: CaptureType) -> dict[str, bool]:
    """Portal options for a capture: full screen is taken without interaction."""
    interactive = capture_type.kind is not CaptureKind.FULL_SCREEN
    return {"modal": False, "interactive": interactive}


async def capture_via_portal(capture_type: CaptureType) -> str:
    """Ask the portal for a screenshot and return the URI of the file it wrote."""
    log.debug("Initiating portal screenshot capture: %s", capture_type)
    async with _session_bus() as bus:
        options: dict[str, tuple[str, Any]] = {
            key: ("b", value) for key, value in build_portal_options(capture_type).items()
        }
        options["handle_token"] = ("s", f"wayscriber_{secrets.token_hex(8)}")
        await bus.call(_BUS_NAME, _BUS_PATH, _BUS_NAME, "AddMatch", "s", (_RESPONSE_MATCH,))
        try:
            (handle,) = await bus.call(
                PORTAL_SERVICE, PORTAL_PATH, SCREENSHOT_INTERFACE, "Screenshot",
                "sa{sv}", ("", options),
            )
        except DBusError as err:
            log.error("Portal screenshot call failed: %s", err)
            if "Cancelled" in str(err) or "denied" in str(err):
                raise PermissionDeniedError() from err
            raise
        log.info("Screenshot request created: %s", handle)
        try:
            signal = await bus.next_signal(REQUEST_INTERFACE, "Response", handle)
        except DBusError as err:
            raise InvalidResponseError("No Response signal received") from err

    if len(signal.body) != 2 or not isinstance(signal.body[1], dict):
        raise InvalidResponseError(f"Failed to parse response args: {signal.body!r}")
    code, results = signal.body
    log.debug("Response signal received: code=%s, results=%s", code, results)
    if code == 0:
        if "uri" not in results:
            raise InvalidResponseError("No 'uri' field in response")
        uri = results["uri"]
        if not isinstance(uri, str):
            raise InvalidResponseError(f"URI is not a string: {uri!r}")
        log.info("Screenshot captured successfully: %s", uri)
        return uri
    if code == 1:
        log.warning("Screenshot cancelled by user")
        raise PermissionDeniedError()
    log.error("Screenshot failed with code %s", code)
    raise InvalidResponseError(f"Portal returned error code {code}")


async def is_portal_available() -> bool:
    """Report whether the session bus is reachable and the portal service is running."""
    try:
        async with _session_bus() as bus:
            (owned,) = await bus.call(
                _BUS_NAME, _BUS_PATH, _BUS_NAME, "NameHasOwner", "s", (PORTAL_SERVICE,)
            )
    except (DBusError, OSError):
        return False
    return bool(owned)