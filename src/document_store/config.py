"""Runtime settings from environment variables and defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _seed_file_from_env() -> Path | None:
    value = os.environ.get("DOCSTORE_SEED_FILE")
    return Path(value).expanduser() if value else None


ENV_FILE_TEMPLATE = """\
# document-store settings
# Sourced by the docstore CLI. Values already set in the environment win.

# JSON or JSONL file loaded into the store on startup
# DOCSTORE_SEED_FILE=~/documents.jsonl

# DEBUG, INFO, WARNING (default), ERROR
# DOCSTORE_LOG_LEVEL=WARNING
"""


@dataclass
class Config:
    """Runtime configuration, resolved from env vars and defaults."""

    seed_file: Path | None = field(default_factory=_seed_file_from_env)

    log_level: str = field(
        default_factory=lambda: os.environ.get("DOCSTORE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    )

    env_file: Path = field(default_factory=lambda: _xdg_config_home() / "document-store" / "env")

    @property
    def log_level_valid(self) -> bool:
        return self.log_level in LOG_LEVELS

    def effective_log_level(self) -> str:
        """The configured level, or WARNING when it isn't a known level name."""
        return self.log_level if self.log_level_valid else DEFAULT_LOG_LEVEL

    def load_env_file(self) -> list[str]:
        """Export settings from the env file into os.environ.

        Keys already present in the environment keep their value. Returns the
        keys that were set.
        """
        if not self.env_file.is_file():
            return []
        loaded = []
        for lineno, line in enumerate(self.env_file.read_text().splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            key = key.strip()
            if not sep or not key:
                _LOGGER.debug("Ignoring line %d of %s", lineno, self.env_file)
                continue
            if key in os.environ:
                continue
            os.environ[key] = value.strip().strip("'\"")
            loaded.append(key)
        if loaded:
            _LOGGER.debug("Loaded %s from %s", ", ".join(loaded), self.env_file)
        return loaded

    def ensure_env_file(self) -> bool:
        """Write the settings template (mode 0600) unless the file exists.

        Returns True if the file was created.
        """
        if self.env_file.exists():
            return False
        self.env_file.parent.mkdir(parents=True, exist_ok=True)
        self.env_file.write_text(ENV_FILE_TEMPLATE)
        self.env_file.chmod(0o600)
        _LOGGER.debug("Wrote settings template to %s", self.env_file)
        return True
