"""tmpl runtime configuration and settings."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer

DEFAULT_REGISTRY_URL = (
    "https://raw.githubusercontent.com/Jamie-Poeffel/tmpl/refs/heads/registry/{name}/file.tmpl"
)


def _default_data_dir() -> str:
    return typer.get_app_dir("tmpl")


@dataclass
class TmplConfig:
    """Runtime configuration for tmpl operations.

    Attributes:
        data_dir: Directory holding installed templates and the log file
        registry_url: Download URL for a template, formatted with ``name``
        download_timeout: Timeout in seconds for registry downloads (default: 30)
        download_attempts: Attempts per download before giving up (default: 3)
        spinner: Rich spinner style used for progress indication
    """

    data_dir: str = field(default_factory=_default_data_dir)
    registry_url: str = DEFAULT_REGISTRY_URL
    download_timeout: int = 30
    download_attempts: int = 3
    spinner: str = "dots"

    @property
    def templates_dir(self) -> Path:
        return Path(self.data_dir) / "templates"

    @classmethod
    def from_env(cls) -> "TmplConfig":
        """Create config from environment variables.

        Environment variables:
            TMPL_DATA_DIR: Data directory for installed templates
            TMPL_REGISTRY_URL: Registry URL format string containing {name}
            TMPL_DOWNLOAD_TIMEOUT: Download timeout in seconds
            TMPL_DOWNLOAD_ATTEMPTS: Download attempts
            TMPL_SPINNER: Spinner style name

        Returns:
            TmplConfig instance with values from environment or defaults
        """
        return cls(
            data_dir=os.getenv("TMPL_DATA_DIR") or _default_data_dir(),
            registry_url=os.getenv("TMPL_REGISTRY_URL", cls.registry_url),
            download_timeout=int(
                os.getenv("TMPL_DOWNLOAD_TIMEOUT", cls.download_timeout)
            ),
            download_attempts=int(
                os.getenv("TMPL_DOWNLOAD_ATTEMPTS", cls.download_attempts)
            ),
            spinner=os.getenv("TMPL_SPINNER", cls.spinner),
        )


# Global config instance (can be overridden)
_config: Optional[TmplConfig] = None


def get_config() -> TmplConfig:
    """Get the global tmpl configuration.

    Returns:
        TmplConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = TmplConfig.from_env()
    return _config


def set_config(config: Optional[TmplConfig]):
    """Set the global tmpl configuration.

    Args:
        config: TmplConfig instance to use globally, or None to reload from env
    """
    global _config
    _config = config
