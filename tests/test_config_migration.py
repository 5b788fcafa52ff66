import pytest

from wayscriber.config.migration import (
    DryRun,
    Migrated,
    NoLegacyConfig,
    migrate_config,
)
from wayscriber.config.paths import primary_config_dir


@pytest.fixture
def config_root(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path


def test_migrate_copies_legacy_into_new_directory(config_root):
    legacy_dir = config_root / "hyprmarker"
    legacy_dir.mkdir()
    (legacy_dir / "config.toml").write_text("legacy = true")
    (legacy_dir / "extra.txt").write_text("payload")

    report = migrate_config(False)
    target = report.target_dir / "config.toml"

    assert target.exists()
    assert target.read_text() == "legacy = true"
    assert report.actions == Migrated(target_existed=False, files_copied=2, backup_path=None)


def test_migrate_creates_backup_when_target_exists(config_root):
    legacy_dir = config_root / "hyprmarker"
    legacy_dir.mkdir()
    (legacy_dir / "config.toml").write_text("legacy = true")

    target_dir = config_root / "wayscriber"
    target_dir.mkdir()
    (target_dir / "config.toml").write_text("replacement = false")

    report = migrate_config(False)

    actions = report.actions
    assert isinstance(actions, Migrated)
    assert actions.target_existed is True
    assert actions.files_copied == 1
    backup = actions.backup_path
    assert backup is not None and backup.exists()
    assert backup.name.startswith("wayscriber.backup.")
    assert (backup / "config.toml").read_text() == "replacement = false"
    assert (report.target_dir / "config.toml").read_text() == "legacy = true"


def test_migrate_supports_dry_run(config_root):
    legacy_dir = config_root / "hyprmarker"
    legacy_dir.mkdir()
    (legacy_dir / "config.toml").write_text("legacy = true")

    report = migrate_config(True)

    assert report.actions == DryRun(target_exists=False, files_to_copy=1)
    assert not primary_config_dir().exists()


def test_no_legacy_directory_reports_nothing_to_do(config_root):
    report = migrate_config(False)
    assert report.actions == NoLegacyConfig()
    assert report.legacy_dir == config_root / "hyprmarker"
    assert report.target_dir == config_root / "wayscriber"
    assert not report.target_dir.exists()


def test_nested_directories_are_copied_and_counted(config_root):
    legacy_dir = config_root / "hyprmarker"
    (legacy_dir / "themes" / "dark").mkdir(parents=True)
    (legacy_dir / "config.toml").write_text("a")
    (legacy_dir / "themes" / "light.toml").write_text("b")
    (legacy_dir / "themes" / "dark" / "main.toml").write_text("c")

    dry = migrate_config(True)
    assert dry.actions == DryRun(target_exists=False, files_to_copy=3)

    report = migrate_config(False)
    assert report.actions == Migrated(target_existed=False, files_copied=3)
    assert (report.target_dir / "themes" / "dark" / "main.toml").read_text() == "c"
    assert (legacy_dir / "config.toml").read_text() == "a"


def test_dry_run_reports_existing_target(config_root):
    legacy_dir = config_root / "hyprmarker"
    legacy_dir.mkdir()
    (legacy_dir / "config.toml").write_text("legacy = true")
    target_dir = config_root / "wayscriber"
    target_dir.mkdir()
    (target_dir / "config.toml").write_text("keep")

    report = migrate_config(True)

    assert report.actions == DryRun(target_exists=True, files_to_copy=1)
    assert (target_dir / "config.toml").read_text() == "keep"