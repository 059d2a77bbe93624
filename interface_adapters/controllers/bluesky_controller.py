# interface_adapters/controllers/bluesky_controller.py
from __future__ import annotations
import logging
from typing import Optional
from fastapi import APIRouter, Depends

from config.settings import Settings
from domain.errors import ConfigurationError
from application.services.thread_splitter import split_thread
from application.use_cases.publish_thread_usecase import PublishThreadUseCase
from interface_adapters.dependencies import get_publish_usecase, get_settings
from interface_adapters.schemas import PreviewRequest, PreviewResponse, PublishRequest, PublishResponse

router = APIRouter(tags=["bluesky"])
logger = logging.getLogger(__name__)

@router.post("/bluesky/check")
def check(uc: PublishThreadUseCase = Depends(get_publish_usecase)) -> dict[str, bool]:
    uc.check()
    return {"ok": True}

@router.post("/bluesky/publish", response_model=PublishResponse)
def publish(
    request: Optional[PublishRequest] = None,
    settings: Settings = Depends(get_settings),
    uc: PublishThreadUseCase = Depends(get_publish_usecase),
) -> PublishResponse:
    # configuración antes que contenido: sin credenciales no se mira el hilo
    if not settings.is_bluesky_configured():
        raise ConfigurationError("Configuración BlueSky incompleta.")
    result = uc.publish(request.thread if request else None)
    logger.info("Hilo publicado (%d posts)", len(result.posts))
    return PublishResponse(posts=[p.uri for p in result.posts])

@router.post("/thread/preview", response_model=PreviewResponse)
def preview(request: PreviewRequest, settings: Settings = Depends(get_settings)) -> PreviewResponse:
    return PreviewResponse(thread=split_thread(request.text, request.maxLength or settings.THREAD_MAX_LENGTH))
