"""Filesystem-backed config file source."""

from pathlib import Path

import structlog

from kship_lib.any.exceptions import KShipConfigurationError, KShipTemplateNotFoundError
from kship_lib.config.loaders import SERVICES_DIR, TEMPLATES_DIR

LOGGER = structlog.get_logger("kship_lib.adapters.files")


class FileSystemSource:
    """
    FileSource reading from a manifests repository.

    A config file is looked up in ``services/<svc>/<file>`` first, then in the
    shared ``templates/<file>``.
    """

    def __init__(self, root: Path):
        self.root = root

    def candidates(self, service: str, file_name: str) -> list[Path]:
        return [self.root / SERVICES_DIR / service / file_name, self.root / TEMPLATES_DIR / file_name]

    def read_config_file(self, service: str, file_name: str) -> str:
        paths = self.candidates(service, file_name)
        for path in paths:
            if path.is_file():
                LOGGER.debug(f"Reading config file {path}")
                try:
                    return path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    raise KShipConfigurationError(f"Failed to read {path}: {e}") from e
        raise KShipTemplateNotFoundError(file_name, [str(p) for p in paths])

    def __repr__(self) -> str:
        return f"FileSystemSource(root={self.root})"
