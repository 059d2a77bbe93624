# interface_adapters/app.py
from __future__ import annotations
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import Settings
from domain.errors import (
    AuthError,
    ConfigurationError,
    MailThreadError,
    ParseError,
    ProtocolError,
    PublishError,
    ThreadValidationError,
)
from application.use_cases.fetch_messages_usecase import (
    FetchMessagesUseCase,
    InboxFactory,
    default_inbox_factory,
)
from application.use_cases.publish_thread_usecase import (
    ClientFactory,
    PublishThreadUseCase,
    default_client_factory,
)
from infrastructure.network.tls_probe import probe_tls
from interface_adapters.controllers.bluesky_controller import router as bluesky_router
from interface_adapters.controllers.health_controller import router as health_router
from interface_adapters.controllers.imap_controller import router as imap_router
from interface_adapters.dependencies import ProbeFn
from interface_adapters.schemas import ErrorResponse

logger = logging.getLogger(__name__)

PREFIX = "/api"

# titular genérico por tipo; el detalle va en "details"
_HEADLINES: dict[type, str] = {
    ProtocolError: "Lectura IMAP fallida.",
    ParseError: "Lectura IMAP fallida.",
    AuthError: "Login BlueSky fallido.",
    PublishError: "Publicación BlueSky fallida.",
}

def _details(exc: MailThreadError) -> str:
    details = str(exc.__cause__ or exc)
    if isinstance(exc, PublishError):
        details = f"{details} ({len(exc.published)} posts ya publicados)"
    return details

async def _mail_thread_error_handler(request: Request, exc: MailThreadError) -> JSONResponse:
    if isinstance(exc, (ConfigurationError, ThreadValidationError)):
        return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump(exclude_none=True))
    headline = next((h for t, h in _HEADLINES.items() if isinstance(exc, t)), "Error interno.")
    logger.error("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    body = ErrorResponse(error=headline, details=_details(exc))
    return JSONResponse(status_code=500, content=body.model_dump())

def create_app(
    settings: Settings | None = None,
    *,
    inbox_factory: InboxFactory = default_inbox_factory,
    client_factory: ClientFactory = default_client_factory,
    probe: ProbeFn = probe_tls,
) -> FastAPI:
    """Construye la API con la configuración y los clientes inyectados (los tests pasan dobles)."""
    settings = settings or Settings()

    app = FastAPI(title="Mail -> BlueSky thread API", version="1.0.0")
    app.state.settings = settings
    app.state.probe = probe
    app.state.fetch_uc = FetchMessagesUseCase(settings, inbox_factory=inbox_factory)
    app.state.publish_uc = PublishThreadUseCase(settings, client_factory=client_factory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins() or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )
    app.add_exception_handler(MailThreadError, _mail_thread_error_handler)

    app.include_router(health_router, prefix=PREFIX)
    app.include_router(imap_router, prefix=PREFIX)
    app.include_router(bluesky_router, prefix=PREFIX)
    return app
