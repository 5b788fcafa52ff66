"""Data types shared by the screenshot capture pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CaptureKind(Enum):
    """What part of the screen a capture covers."""

    FULL_SCREEN = "full_screen"
    ACTIVE_WINDOW = "active_window"
    SELECTION = "selection"


@dataclass(frozen=True)
class CaptureType:
    """A capture request's target; selections carry a rectangle."""

    kind: CaptureKind
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def full_screen(cls) -> CaptureType:
        return cls(CaptureKind.FULL_SCREEN)

    @classmethod
    def active_window(cls) -> CaptureType:
        return cls(CaptureKind.ACTIVE_WINDOW)

    @classmethod
    def selection(cls, x: int, y: int, width: int, height: int) -> CaptureType:
        if width < 0 or height < 0:
            raise ValueError("selection width and height must not be negative")
        return cls(CaptureKind.SELECTION, x, y, width, height)


@dataclass
class CaptureResult:
    """Image bytes plus where they were delivered."""

    image_data: bytes
    saved_path: Path | None = None
    copied_to_clipboard: bool = False


@dataclass(frozen=True)
class CaptureOutcome:
    """Either a successful result or a failure message."""

    result: CaptureResult | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("an outcome holds exactly one of result or error")

    @classmethod
    def success(cls, result: CaptureResult) -> CaptureOutcome:
        return cls(result=result)

    @classmethod
    def failed(cls, message: str) -> CaptureOutcome:
        return cls(error=message)

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class CaptureDestination(Enum):
    """Where the captured image should be delivered."""

    CLIPBOARD_ONLY = "clipboard_only"
    FILE_ONLY = "file_only"
    CLIPBOARD_AND_FILE = "clipboard_and_file"


class CaptureError(Exception):
    """Base class for every capture failure."""

    template = "{}"

    def __init__(self, detail: object = "") -> None:
        self.detail = detail
        super().__init__(self.template.format(detail))


class PortalUnavailableError(CaptureError):
    template = "xdg-desktop-portal is not available"


class PermissionDeniedError(CaptureError):
    template = "Screenshot permission denied by user"


class DBusError(CaptureError):
    template = "D-Bus communication error: {}"


class SaveError(CaptureError):
    template = "Failed to save screenshot: {}"


class ClipboardError(CaptureError):
    template = "Clipboard operation failed: {}"


class ImageError(CaptureError):
    template = "Image processing error: {}"


class InvalidResponseError(CaptureError):
    template = "Portal returned invalid response: {}"


class CaptureState(Enum):
    """Phase of a capture operation."""

    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class CaptureStatus:
    """Current phase of a capture, with a message when it failed."""

    state: CaptureState
    message: str | None = None

    def __post_init__(self) -> None:
        if (self.state is CaptureState.FAILED) != (self.message is not None):
            raise ValueError("only a failed status carries a message")

    @classmethod
    def idle(cls) -> CaptureStatus:
        return cls(CaptureState.IDLE)

    @classmethod
    def awaiting_permission(cls) -> CaptureStatus:
        return cls(CaptureState.AWAITING_PERMISSION)

    @classmethod
    def in_progress(cls) -> CaptureStatus:
        return cls(CaptureState.IN_PROGRESS)

    @classmethod
    def success(cls) -> CaptureStatus:
        return cls(CaptureState.SUCCESS)

    @classmethod
    def failed(cls, message: str) -> CaptureStatus:
        return cls(CaptureState.FAILED, message)