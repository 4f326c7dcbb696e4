"""Unit tests for the load-create-migrate workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from core.config import VConfigSettings
from core.errors import VConfigMigrationError, VConfigValidationError
from migration.workflow import MigrationWorkflow
from store.config_store import VersionedConfigStore
from store.versioned_codec import save_config

_SETTINGS = VConfigSettings(fsync=False)


@dataclass
class ConfigV1:
    Version: str = field(metadata={"name": "version"})
    roots: list[str] = field(default_factory=list)
    checkpoint: str = ""


@dataclass
class ConfigV2:
    Version: str = field(metadata={"name": "version"})
    roots: list[str] = field(default_factory=list)
    total_count: int = 0
    paths: list[str] = field(default_factory=list)


@dataclass
class Unversioned:
    roots: list[str] = field(default_factory=list)


def _upgrade_v1(previous: ConfigV1) -> ConfigV2:
    return ConfigV2(Version="2", roots=list(previous.roots))


def _workflow(path: Path) -> MigrationWorkflow[ConfigV2]:
    store = VersionedConfigStore(path, _SETTINGS)
    workflow = MigrationWorkflow(
        store,
        current_version="2",
        current_shape=ConfigV2,
        create=lambda: ConfigV2(Version="2", roots=["root1", "root2"]),
    )
    workflow.register("1", ConfigV1, _upgrade_v1)
    return workflow


def test_creates_config_when_missing(tmp_path: Path) -> None:
    """A missing file should be created from the factory."""
    path = tmp_path / ".state-demo.json"

    config = _workflow(path).load_create_migrate()

    assert config.roots == ["root1", "root2"] and path.exists()


def test_migrates_v1_file(tmp_path: Path) -> None:
    """A v1 file should be upgraded and saved as v2."""
    path = tmp_path / ".state-demo.json"
    save_config(ConfigV1(Version="1", roots=["a", "b"], checkpoint="c"), path, _SETTINGS)

    config = _workflow(path).load_create_migrate()

    assert (config.Version, config.roots) == ("2", ["a", "b"])


def test_loads_current_version_without_migrating(tmp_path: Path) -> None:
    """A current file should be loaded as-is."""
    path = tmp_path / ".state-demo.json"
    save_config(ConfigV2(Version="2", roots=["x"], total_count=4), path, _SETTINGS)

    config = _workflow(path).load_create_migrate()

    assert config.total_count == 4


def test_unknown_version_fails(tmp_path: Path) -> None:
    """A version with no registered step should raise a migration error."""
    path = tmp_path / ".state-demo.json"
    path.write_text('{"version": "0.9"}', encoding="utf-8")

    with pytest.raises(VConfigMigrationError, match="0.9"):
        _workflow(path).load_create_migrate()


def test_chained_steps_reach_current_version(tmp_path: Path) -> None:
    """Steps registered per version should chain until the current one."""
    path = tmp_path / ".state-demo.json"
    path.write_text('{"version": "0", "roots": ["z"]}', encoding="utf-8")
    workflow = _workflow(path)
    workflow.register("0", ConfigV1, lambda previous: ConfigV1(Version="1", roots=previous.roots))

    config = workflow.load_create_migrate()

    assert (config.Version, config.roots) == ("2", ["z"])


def test_cycling_steps_fail(tmp_path: Path) -> None:
    """Upgrades that never reach the current version should stop."""
    path = tmp_path / ".state-demo.json"
    save_config(ConfigV1(Version="1"), path, _SETTINGS)
    store = VersionedConfigStore(path, _SETTINGS)
    workflow = MigrationWorkflow(store, "2", ConfigV2, lambda: ConfigV2(Version="2"))
    workflow.register("1", ConfigV1, lambda previous: ConfigV1(Version="1"))

    with pytest.raises(VConfigMigrationError):
        workflow.load_create_migrate()


def test_register_rejects_current_version(tmp_path: Path) -> None:
    """Registering a step from the current version is a mistake."""
    workflow = _workflow(tmp_path / "state.json")

    with pytest.raises(VConfigMigrationError):
        workflow.register("2", ConfigV1, _upgrade_v1)


def test_register_rejects_duplicate_version(tmp_path: Path) -> None:
    """Each stored version has at most one step."""
    workflow = _workflow(tmp_path / "state.json")

    with pytest.raises(VConfigMigrationError):
        workflow.register("1", ConfigV1, _upgrade_v1)


def test_register_rejects_unversioned_shape(tmp_path: Path) -> None:
    """Source shapes must pass structural validation."""
    workflow = _workflow(tmp_path / "state.json")

    with pytest.raises(VConfigValidationError):
        workflow.register("0", Unversioned, _upgrade_v1)
