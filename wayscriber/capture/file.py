"""Saving screenshots to disk."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import platformdirs

from .types import SaveError

log = logging.getLogger(__name__)


def _default_save_directory() -> Path:
    return Path(platformdirs.user_pictures_dir()) / "Wayscriber"


@dataclass
class FileSaveConfig:
    """Where and under what name screenshots are written."""

    save_directory: Path = field(default_factory=_default_save_directory)
    filename_template: str = "screenshot_%Y-%m-%d_%H%M%S"
    format: str = "png"


def generate_filename(template: str, format: str) -> str:
    """Expand strftime codes in the template with the local time and add the extension."""
    return f"{datetime.now().strftime(template)}.{format}"


def ensure_directory_exists(directory: os.PathLike | str) -> Path:
    """Create the directory if needed and return its resolved path."""
    directory = Path(directory)
    if not directory.exists():
        log.info("Creating screenshot directory: %s", directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise SaveError(err) from err
    try:
        return directory.resolve(strict=True)
    except OSError:
        return directory


def save_screenshot(image_data: bytes, config: FileSaveConfig) -> Path:
    """Write the image to a new file named from the template; return its path."""
    directory = ensure_directory_exists(config.save_directory)
    file_path = directory / generate_filename(config.filename_template, config.format)
    log.info("Saving screenshot to: %s (%d bytes)", file_path, len(image_data))
    try:
        file_path.write_bytes(image_data)
        log.debug("File written: %d bytes", file_path.stat().st_size)
        if os.name == "posix":
            file_path.chmod(0o600)
    except OSError as err:
        raise SaveError(err) from err
    log.info("Screenshot saved successfully: %s", file_path)
    return file_path


def expand_tilde(path: str) -> Path:
    """Replace a leading ``~/`` with the home directory."""
    if path.startswith("~/"):
        try:
            home = Path.home()
        except RuntimeError:
            return Path(path)
        return home / path[2:]
    return Path(path)