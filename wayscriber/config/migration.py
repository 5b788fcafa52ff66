"""Moving configuration from the legacy hyprmarker directory to the current one."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .paths import legacy_config_dir, primary_config_dir

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoLegacyConfig:
    """No legacy configuration directory was found; nothing was done."""


@dataclass(frozen=True)
class DryRun:
    """What a migration would do, without doing it."""

    target_exists: bool
    files_to_copy: int


@dataclass(frozen=True)
class Migrated:
    """A completed migration."""

    target_existed: bool
    files_copied: int
    backup_path: Path | None = None


MigrationActions = NoLegacyConfig | DryRun | Migrated


@dataclass(frozen=True)
class MigrationReport:
    """The directories involved and what was done."""

    legacy_dir: Path
    target_dir: Path
    actions: MigrationActions


def migrate_config(dry_run: bool) -> MigrationReport:
    """Copy legacy configuration files into the current directory.

    An existing target directory is first moved aside to a timestamped backup.
    With ``dry_run`` only the planned work is reported.
    """
    legacy_dir = legacy_config_dir()
    target_dir = primary_config_dir()

    if not legacy_dir.exists():
        return MigrationReport(legacy_dir, target_dir, NoLegacyConfig())

    target_exists = target_dir.exists()
    files_to_copy = _copy_directory(legacy_dir, target_dir, dry_run=True)

    if dry_run:
        return MigrationReport(legacy_dir, target_dir, DryRun(target_exists, files_to_copy))

    backup_path = None
    if target_exists:
        parent = target_dir.parent
        if parent == target_dir:
            raise RuntimeError(f"Could not determine parent directory for {target_dir}")
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        candidate = parent / f"wayscriber.backup.{stamp}"
        if candidate.exists():
            raise FileExistsError(f"Backup directory already exists at {candidate}")
        candidate.parent.mkdir(parents=True, exist_ok=True)
        target_dir.rename(candidate)
        log.info("Moved existing directory %s to %s", target_dir, candidate)
        backup_path = candidate

    files_copied = _copy_directory(legacy_dir, target_dir, dry_run=False)
    return MigrationReport(
        legacy_dir,
        target_dir,
        Migrated(target_exists, files_copied, backup_path),
    )


def _copy_directory(src: Path, dest: Path, dry_run: bool) -> int:
    """Copy a tree file by file and return how many files it holds."""
    if not dry_run:
        dest.mkdir(parents=True, exist_ok=True)

    count = 0
    for entry in src.iterdir():
        dest_path = dest / entry.name
        if entry.is_dir() and not entry.is_symlink():
            count += _copy_directory(entry, dest_path, dry_run)
            continue
        count += 1
        if not dry_run:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(entry, dest_path)
    return count