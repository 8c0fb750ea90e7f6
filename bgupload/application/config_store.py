"""
Durable configuration store.

Persists the active UploadConfiguration as JSON in a location shared by the
producer and the executing process, so a worker started cold can rebuild
its pipeline. Writes go to a temporary file that is then renamed over the
target, so readers never observe a partial document.

Dependencies: pydantic, bgupload.models.configuration
System role: Cross-process configuration hand-off
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from bgupload.core.exceptions import ConfigurationError
from bgupload.models.configuration import UploadConfiguration

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """JSON file holding the current UploadConfiguration."""

    def __init__(self, path: str | Path) -> None:
        """
        Initialize store.

        Args:
            path: File path; parent directories are created on save
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, configuration: UploadConfiguration) -> None:
        """
        Persist a configuration, replacing any previous one atomically.

        Args:
            configuration: Configuration to store

        Raises:
            ConfigurationError: Policy cannot be serialised or write failed
        """
        if not configuration.retry_policy.is_persistable:
            raise ConfigurationError(
                "Custom retry policies cannot be persisted",
                details={"path": str(self._path)},
            )

        document = configuration.model_dump_json(indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(document)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("%s:save - OSError: %s", __name__, e)
            raise ConfigurationError(
                f"Failed to write configuration: {e}",
                details={"path": str(self._path)},
            ) from e

        logger.info(
            "%s:save - Configuration stored",
            __name__,
            extra={"path": str(self._path), "extension_target": configuration.extension_target},
        )

    def load(self) -> Optional[UploadConfiguration]:
        """
        Load the stored configuration.

        Returns:
            UploadConfiguration | None: Stored configuration, or None if
                nothing was saved yet

        Raises:
            ConfigurationError: The stored document is unreadable or invalid
        """
        try:
            document = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read configuration: {e}",
                details={"path": str(self._path)},
            ) from e

        try:
            return UploadConfiguration.model_validate_json(document)
        except ValidationError as e:
            raise ConfigurationError(
                "Stored configuration is invalid",
                details={"path": str(self._path), "error_count": e.error_count()},
            ) from e

    def clear(self) -> None:
        """Remove the stored configuration if present."""
        self._path.unlink(missing_ok=True)
