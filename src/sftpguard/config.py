"""Configuration for sftpguard.

Settings can come from defaults, environment variables or a TOML file.

Environment variables (all optional):
    SFTPGUARD_CLIENT_NAME: Component name used in error messages (default: sftp)
    SFTPGUARD_PATH_SEPARATOR: Remote path separator (default: /)
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for Python versions shipping tomllib
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "sftpguard"


@dataclass
class GuardConfig:
    """Settings shared by the session adapter and error formatting."""

    client_name: str = "sftp"
    path_separator: str = "/"

    def __post_init__(self):
        """Validate configuration."""
        if not isinstance(self.client_name, str) or not self.client_name.strip():
            raise ConfigError("client_name must be a non-empty string")
        if not isinstance(self.path_separator, str) or not self.path_separator:
            raise ConfigError("path_separator must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GuardConfig":
        """Create from dictionary, ignoring unknown keys."""
        return cls(
            client_name=data.get("client_name", "sftp"),
            path_separator=data.get("path_separator", "/"),
        )

    @classmethod
    def from_environment(cls) -> "GuardConfig":
        """Load configuration from environment variables.

        Returns:
            GuardConfig with values from environment or defaults
        """
        return cls(
            client_name=os.getenv("SFTPGUARD_CLIENT_NAME", "sftp"),
            path_separator=os.getenv("SFTPGUARD_PATH_SEPARATOR", "/"),
        )

    @classmethod
    def load(cls, path: str | Path) -> "GuardConfig":
        """Load configuration from a TOML file.

        Settings are read from a [sftpguard] table if the file has one,
        otherwise from the top level.

        Raises:
            ConfigError: File missing, unreadable or malformed
        """
        config_path = Path(path).expanduser()
        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {config_path}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
        except tomli.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

        section = data.get(CONFIG_SECTION, data)
        if not isinstance(section, dict):
            raise ConfigError(f"[{CONFIG_SECTION}] in {config_path} must be a table")

        logger.debug(f"Loaded configuration from {config_path}")
        return cls.from_dict(section)
