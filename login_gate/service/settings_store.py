from __future__ import annotations

import os
import threading

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..domain.decision import GateConfig
from ..domain.paths import is_legacy_login, sanitize_path_setting
from ..logging_conf import get_logger

__all__ = [
    "ADMIN_PREFIX",
    "GateSettings",
    "SettingsStore",
    "settings_from_env",
]

logger = get_logger("service.settings")

# URL prefix of the admin settings API; requests under it bypass the gate.
ADMIN_PREFIX = "/admin/login-gate"


class GateSettings(BaseModel):
    """Stored login gate options, sanitized on the way in."""

    model_config = ConfigDict(frozen=True)

    hidden_login_path: str = ""
    block_redirect_path: str = ""
    site_url: str = ""

    @field_validator("hidden_login_path", "block_redirect_path", mode="before")
    @classmethod
    def _sanitize_path(cls, v: object) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("path must be a string")
        return sanitize_path_setting(v)

    @field_validator("site_url", mode="before")
    @classmethod
    def _sanitize_site_url(cls, v: object) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("site_url must be a string")
        url = v.strip().rstrip("/")
        if url and not url.lower().startswith(("http://", "https://")):
            raise ValueError("site_url must be an absolute http(s) URL")
        return url

    @model_validator(mode="after")
    def _check_paths(self) -> GateSettings:
        hidden = self.hidden_login_path
        block = self.block_redirect_path
        if hidden and is_legacy_login(f"/{hidden}"):
            raise ValueError("hidden_login_path must not point at the legacy login endpoint")
        if hidden and f"/{hidden}/".startswith(f"{ADMIN_PREFIX}/"):
            raise ValueError("hidden_login_path must not be under the admin API prefix")
        if block and is_legacy_login(f"/{block}"):
            raise ValueError("block_redirect_path must not point at the legacy login endpoint")
        if hidden and block == hidden:
            raise ValueError("block_redirect_path must differ from hidden_login_path")
        return self

    @property
    def enabled(self) -> bool:
        return bool(self.hidden_login_path)

    def to_config(self) -> GateConfig:
        return GateConfig(
            hidden_login_path=self.hidden_login_path,
            block_redirect_path=self.block_redirect_path,
            site_url=self.site_url,
        )


def settings_from_env() -> GateSettings:
    """Build settings from HIDDEN_LOGIN_PATH, BLOCK_REDIRECT_PATH and SITE_URL.

    Unset variables mean "empty"; an empty hidden path disables the gate.
    """
    return GateSettings(
        hidden_login_path=os.getenv("HIDDEN_LOGIN_PATH", ""),
        block_redirect_path=os.getenv("BLOCK_REDIRECT_PATH", ""),
        site_url=os.getenv("SITE_URL", ""),
    )


class SettingsStore:
    """Process-wide holder of the current gate settings.

    Readers get the current immutable snapshot without locking; writers
    validate first and then swap the snapshot under a lock.
    """

    def __init__(self, initial: GateSettings | None = None) -> None:
        self._lock = threading.Lock()
        self._current = initial if initial is not None else settings_from_env()

    @classmethod
    def from_env(cls) -> SettingsStore:
        return cls(settings_from_env())

    @property
    def current(self) -> GateSettings:
        return self._current

    def get_hidden_login_path(self) -> str:
        return self._current.hidden_login_path

    def get_block_redirect_path(self) -> str:
        return self._current.block_redirect_path

    def snapshot(self) -> GateConfig:
        return self._current.to_config()

    def update(self, **changes: str | None) -> GateSettings:
        """Apply a partial update; raises pydantic.ValidationError on bad input."""
        with self._lock:
            merged = self._current.model_dump()
            merged.update({k: v for k, v in changes.items() if k in GateSettings.model_fields})
            new = GateSettings(**merged)
            self._current = new
        logger.info(
            "settings.update",
            extra={
                "event": "settings_update",
                "fields": sorted(k for k in changes if k in GateSettings.model_fields),
                "gate_enabled": new.enabled,
            },
        )
        return new

    def reset(self) -> GateSettings:
        """Reload settings from the environment; raises pydantic.ValidationError on bad input."""
        new = settings_from_env()
        with self._lock:
            self._current = new
        logger.info(
            "settings.reset",
            extra={"event": "settings_reset", "gate_enabled": new.enabled},
        )
        return new
