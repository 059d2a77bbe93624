# interface_adapters/controllers/health_controller.py
from __future__ import annotations
from fastapi import APIRouter, Depends

from config.settings import Settings
from interface_adapters.dependencies import get_settings
from interface_adapters.schemas import BlueskyInfo, HealthResponse, ImapInfo

router = APIRouter(tags=["health"])

@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    # solo datos no sensibles: nunca usuario ni contraseñas
    return HealthResponse(
        imapConfigured=settings.is_imap_configured(),
        blueSkyConfigured=settings.is_bluesky_configured(),
        adminConfigured=settings.is_admin_configured(),
        imap=ImapInfo(
            host=settings.IMAP_HOST,
            port=settings.IMAP_PORT,
            mailbox=settings.IMAP_MAILBOX,
            tls=settings.IMAP_TLS,
            userConfigured=bool(settings.IMAP_USER),
        ),
        bluesky=BlueskyInfo(
            host=settings.BLUESKY_HOST,
            handleConfigured=bool(settings.BLUESKY_HANDLE),
        ),
    )
