from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class SettingsUpdateRequest(BaseModel):
    """Partial update of the login gate settings; omitted fields are kept."""
    hidden_login_path: Optional[str] = None
    block_redirect_path: Optional[str] = None
    site_url: Optional[str] = None


class SettingsResponse(BaseModel):
    """Current (sanitized) login gate settings."""
    hidden_login_path: str
    block_redirect_path: str
    site_url: str
    enabled: bool
