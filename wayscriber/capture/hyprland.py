"""Fast capture paths for Hyprland and wlroots compositors using hyprctl, slurp and grim."""

from __future__ import annotations

import asyncio
import json
import logging
import math
import subprocess
from typing import Any

from .types import ImageError, InvalidResponseError

log = logging.getLogger(__name__)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _number(items: list, index: int, name: str) -> float:
    value = items[index] if index < len(items) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(f"Invalid '{name}[{index}]' value")
    return float(value)


def _array(data: Any, name: str) -> list:
    value = data.get(name) if isinstance(data, dict) else None
    if not isinstance(value, list):
        raise InvalidResponseError(f"Missing '{name}' in hyprctl output")
    return value


def parse_active_window_geometry(data: bytes | str) -> str:
    """Turn ``hyprctl activewindow -j`` output into a grim geometry ``"x,y WxH"``."""
    try:
        parsed = json.loads(data)
    except (ValueError, UnicodeDecodeError) as err:
        raise InvalidResponseError(f"Failed to parse hyprctl output: {err}") from err

    at = _array(parsed, "at")
    size = _array(parsed, "size")
    x, y = _number(at, 0, "at"), _number(at, 1, "at")
    width, height = _number(size, 0, "size"), _number(size, 1, "size")

    if width <= 0.0 or height <= 0.0:
        raise InvalidResponseError("Active window has non-positive dimensions")

    return (
        f"{_round_half_away(x)},{_round_half_away(y)} "
        f"{_round_half_away(width)}x{_round_half_away(height)}"
    )


def _run(args: list[str], what: str) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(args, capture_output=True, check=False)
    except OSError as err:
        raise ImageError(f"Failed to run {what}: {err}") from err


def _stderr(proc: subprocess.CompletedProcess) -> str:
    return (proc.stderr or b"").decode("utf-8", errors="replace").strip()


def _grim(geometry: str, failure: str, empty: str) -> bytes:
    log.debug("Capturing via grim: %s", geometry)
    proc = _run(["grim", "-g", geometry, "-"], "grim")
    if proc.returncode != 0:
        raise ImageError(f"{failure}: {_stderr(proc)}")
    if not proc.stdout:
        raise ImageError(empty)
    return proc.stdout


def _active_window_blocking() -> bytes:
    proc = _run(["hyprctl", "activewindow", "-j"], "hyprctl activewindow")
    if proc.returncode != 0:
        raise ImageError(f"hyprctl activewindow failed: {_stderr(proc)}")
    geometry = parse_active_window_geometry(proc.stdout)
    return _grim(geometry, "grim failed", "grim returned empty screenshot")


def _selection_blocking() -> bytes:
    proc = _run(["slurp", "-f", "%x,%y %wx%h"], "slurp for region selection")
    if proc.returncode != 0:
        raise ImageError(f"slurp selection cancelled or failed: {_stderr(proc)}")
    try:
        geometry = (proc.stdout or b"").decode("utf-8").strip()
    except UnicodeDecodeError as err:
        raise ImageError(f"Invalid slurp output: {err}") from err
    if not geometry:
        raise ImageError("slurp returned empty geometry")
    return _grim(
        geometry,
        "grim selection capture failed",
        "grim returned empty selection screenshot",
    )


async def capture_active_window_hyprland() -> bytes:
    """Capture the focused Hyprland window with ``hyprctl`` and ``grim``."""
    return await asyncio.to_thread(_active_window_blocking)


async def capture_selection_hyprland() -> bytes:
    """Capture a region the user selects with ``slurp``, grabbed by ``grim``."""
    return await asyncio.to_thread(_selection_blocking)