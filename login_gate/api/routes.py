from __future__ import annotations

import os
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from ..logging_conf import get_logger
from ..service.settings_store import ADMIN_PREFIX, GateSettings, SettingsStore
from .models import SettingsResponse, SettingsUpdateRequest

router = APIRouter(prefix=ADMIN_PREFIX)
logger = get_logger("api")


def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """Check X-Admin-Token against ADMIN_TOKEN.

    The admin API is hidden entirely (404) when ADMIN_TOKEN is unset.
    """
    expected = os.getenv("ADMIN_TOKEN", "")
    if not expected:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error_code": "unauthorized", "error_message": "Invalid admin token"},
        )


def _to_response(current: GateSettings) -> SettingsResponse:
    return SettingsResponse(
        hidden_login_path=current.hidden_login_path,
        block_redirect_path=current.block_redirect_path,
        site_url=current.site_url,
        enabled=current.enabled,
    )


@router.get(
    "/settings",
    response_model=SettingsResponse,
    summary="Read login gate settings",
    dependencies=[Depends(require_admin)],
)
async def read_settings(store: SettingsStore = Depends(get_settings_store)) -> SettingsResponse:
    """Return the current login gate settings."""
    return _to_response(store.current)


@router.put(
    "/settings",
    response_model=SettingsResponse,
    summary="Update login gate settings",
    dependencies=[Depends(require_admin)],
)
async def update_settings(
    req: SettingsUpdateRequest,
    store: SettingsStore = Depends(get_settings_store),
) -> SettingsResponse:
    """Sanitize and store new settings; omitted fields keep their value."""
    changes = req.model_dump(exclude_unset=True)
    try:
        current = store.update(**changes)
    except ValidationError as e:
        message = "; ".join(err["msg"] for err in e.errors())
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error_code": "invalid_setting", "error_message": message},
        )
    return _to_response(current)


@router.delete(
    "/settings",
    response_model=SettingsResponse,
    summary="Reset login gate settings to environment defaults",
    dependencies=[Depends(require_admin)],
)
async def reset_settings(store: SettingsStore = Depends(get_settings_store)) -> SettingsResponse:
    """Drop runtime changes and reload HIDDEN_LOGIN_PATH, BLOCK_REDIRECT_PATH and SITE_URL."""
    return _to_response(store.reset())
