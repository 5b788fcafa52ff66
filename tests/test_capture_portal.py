import pytest

from wayscriber.capture.portal import (
    build_portal_options,
    capture_via_portal,
    is_portal_available,
)
from wayscriber.capture.types import CaptureType, DBusError


def test_build_portal_options_full_screen():
    options = build_portal_options(CaptureType.full_screen())
    assert options["interactive"] is False
    assert options["modal"] is False


def test_build_portal_options_selection():
    options = build_portal_options(CaptureType.selection(0, 0, 100, 100))
    assert options["interactive"] is True


def test_build_portal_options_active_window():
    options = build_portal_options(CaptureType.active_window())
    assert options == {"modal": False, "interactive": True}


@pytest.mark.asyncio
async def test_capture_without_bus_address(monkeypatch):
    monkeypatch.delenv("DBUS_SESSION_BUS_ADDRESS", raising=False)
    with pytest.raises(DBusError):
        await capture_via_portal(CaptureType.full_screen())


@pytest.mark.asyncio
async def test_capture_with_unreachable_socket(monkeypatch, tmp_path):
    monkeypatch.setenv("DBUS_SESSION_BUS_ADDRESS", f"unix:path={tmp_path / 'missing'}")
    with pytest.raises(DBusError):
        await capture_via_portal(CaptureType.full_screen())


@pytest.mark.asyncio
async def test_capture_with_unsupported_transport(monkeypatch):
    monkeypatch.setenv("DBUS_SESSION_BUS_ADDRESS", "tcp:host=localhost,port=1")
    with pytest.raises(DBusError):
        await capture_via_portal(CaptureType.active_window())


@pytest.mark.asyncio
async def test_portal_unavailable_without_bus(monkeypatch):
    monkeypatch.delenv("DBUS_SESSION_BUS_ADDRESS", raising=False)
    assert await is_portal_available() is False