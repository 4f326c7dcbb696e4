"""Load, create or migrate a versioned config file.

The workflow peeks the stored version, upgrades it through the step
registered for that exact version, saves the result and repeats until the
stored version is the current one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from core.constants import VERSION_FIELD_NAME
from core.errors import VConfigMigrationError, VConfigNotFoundError
from core.logging_config import get_logger
from core.record_validation import validate_record
from store.config_store import VersionedConfigStore

RecordT = TypeVar("RecordT")

logger = get_logger(__name__)


@dataclass(frozen=True)
class MigrationStep:
    """One upgrade from a stored version to a newer record.

    Attributes:
        version: Stored version this step applies to.
        source_shape: Record type used to decode the stored version.
        upgrade: Builds the next record from the decoded one.
    """

    version: str
    source_shape: type[Any]
    upgrade: Callable[[Any], Any]


class MigrationWorkflow(Generic[RecordT]):
    """Version-keyed migration registry bound to one config store."""

    def __init__(
        self,
        store: VersionedConfigStore,
        current_version: str,
        current_shape: type[RecordT],
        create: Callable[[], RecordT],
    ) -> None:
        validate_record(current_shape)
        self._store = store
        self._current_version = current_version
        self._current_shape = current_shape
        self._create = create
        self._steps: dict[str, MigrationStep] = {}

    @property
    def current_version(self) -> str:
        """Version produced by this workflow."""
        return self._current_version

    def register(
        self,
        version: str,
        source_shape: type[Any],
        upgrade: Callable[[Any], Any],
    ) -> None:
        """Register the upgrade applied when ``version`` is stored.

        Raises:
            VConfigMigrationError: If the version is current or already registered.
            VConfigValidationError: If ``source_shape`` lacks a textual Version field.
        """
        validate_record(source_shape)
        if version == self._current_version:
            raise VConfigMigrationError(
                f"Cannot register a migration from current version {version!r}."
            )
        if version in self._steps:
            raise VConfigMigrationError(f"Migration from version {version!r} already registered.")
        self._steps[version] = MigrationStep(
            version=version,
            source_shape=source_shape,
            upgrade=upgrade,
        )

    def load_create_migrate(self) -> RecordT:
        """Return the current record, creating or upgrading the stored file first.

        Returns:
            Record of the current shape.

        Raises:
            VConfigMigrationError: If a stored version has no registered step,
                or the registered steps never reach the current version.
        """
        for _ in range(len(self._steps) + 1):
            try:
                version = self._store.peek_version()
            except VConfigNotFoundError:
                return self._create_initial()
            if version == self._current_version:
                return self._store.load(self._current_shape)
            self._apply_step(version)
        raise VConfigMigrationError(
            f"Migrations for {self._store.path} did not reach version "
            f"{self._current_version!r}. Check that registered upgrades do not cycle."
        )

    def _create_initial(self) -> RecordT:
        record = self._create()
        self._store.save(record)
        logger.info(
            "config_created",
            path=str(self._store.path),
            version=getattr(record, VERSION_FIELD_NAME),
        )
        return record

    def _apply_step(self, version: str) -> None:
        step = self._steps.get(version)
        if step is None:
            raise VConfigMigrationError(
                f"Unknown config version {version!r} at {self._store.path}. "
                f"Known versions: {', '.join(sorted(self._steps)) or 'none'}; "
                f"current: {self._current_version!r}."
            )
        previous = self._store.load(step.source_shape)
        upgraded = step.upgrade(previous)
        self._store.save(upgraded)
        logger.info(
            "config_migrated",
            path=str(self._store.path),
            from_version=version,
            to_version=getattr(upgraded, VERSION_FIELD_NAME),
        )
