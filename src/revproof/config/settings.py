"""revproof runtime configuration.

All settings can be overridden via environment variables with the
REVPROOF_ prefix.
"""
import os
from dataclasses import dataclass

from revproof.core.constants import DEFAULT_STORAGE_PATH, DEFAULT_TENANT


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """revproof configuration."""

    # Storage
    storage_path: str = DEFAULT_STORAGE_PATH

    # Receipts
    receipts_enabled: bool = True
    tenant_id: str = DEFAULT_TENANT

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration from environment variables."""
        config = cls()

        if "REVPROOF_STORAGE_PATH" in os.environ:
            config.storage_path = os.environ["REVPROOF_STORAGE_PATH"]
        if "REVPROOF_RECEIPTS" in os.environ:
            config.receipts_enabled = _env_flag(os.environ["REVPROOF_RECEIPTS"])
        if "REVPROOF_TENANT" in os.environ:
            config.tenant_id = os.environ["REVPROOF_TENANT"]

        return config

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.storage_path:
            errors.append("storage_path must not be empty")

        if not self.tenant_id:
            errors.append("tenant_id must not be empty")

        return errors


_active: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings, loading them from the environment once."""
    global _active
    if _active is None:
        _active = Settings.from_env()
    return _active


def configure(settings: Settings | None) -> None:
    """Replace the active settings. None reloads from the environment on next use."""
    global _active
    _active = settings
