# application/use_cases/publish_thread_usecase.py
from __future__ import annotations
import logging
from functools import reduce
from collections.abc import Sequence
from typing import Callable, Protocol

from config.settings import Settings
from domain.errors import AuthError, ConfigurationError, PublishError, ThreadValidationError
from domain.models import PostRef, PublishChainState, PublishResult, ReplyRef, ThreadChunk
from application.services.thread_splitter import to_chunks
from infrastructure.social.bluesky_client import BlueskyClient

logger = logging.getLogger(__name__)

class SocialClient(Protocol):
    def login(self, identifier: str, password: str) -> str: ...
    def create_post(self, text: str, reply: ReplyRef | None = None) -> PostRef: ...

ClientFactory = Callable[[Settings], SocialClient]

def default_client_factory(settings: Settings) -> SocialClient:
    return BlueskyClient(service=settings.BLUESKY_HOST, timeout=settings.BLUESKY_TIMEOUT)

class PublishThreadUseCase:
    def __init__(self, settings: Settings, *, client_factory: ClientFactory = default_client_factory) -> None:
        self.settings = settings
        self.client_factory = client_factory

    def _login(self) -> SocialClient:
        st = self.settings
        if not st.is_bluesky_configured():
            raise ConfigurationError("Configuración BlueSky incompleta.")
        client = self.client_factory(st)
        try:
            client.login(st.BLUESKY_HANDLE, st.BLUESKY_APP_PASSWORD)
        except Exception as exc:
            raise AuthError(f"Login BlueSky fallido: {exc}") from exc
        return client

    def check(self) -> None:
        """Solo valida credenciales (login), sin publicar nada."""
        self._login()

    def _validate(self, thread: Sequence[str]) -> list[str]:
        if isinstance(thread, (str, bytes)) or not isinstance(thread, Sequence) or len(thread) == 0:
            raise ThreadValidationError("No se han enviado contenidos para el hilo.")
        if not all(isinstance(t, str) for t in thread):
            raise ThreadValidationError("Cada entrada del hilo debe ser texto.")
        max_length = self.settings.THREAD_MAX_LENGTH
        too_long = [i + 1 for i, t in enumerate(thread) if len(t) > max_length]
        if too_long:
            raise ThreadValidationError(
                f"Posts de más de {max_length} caracteres: {', '.join(map(str, too_long))}."
            )
        return list(thread)

    def publish(self, thread: Sequence[str]) -> PublishResult:
        """
        Publica el primer trozo como raíz y cada siguiente como respuesta a (raíz, anterior).
        Sin rollback: si falla el trozo k, los 0..k-1 ya publicados quedan en PublishError.published.
        """
        texts = self._validate(thread)
        client = self._login()

        def step(state: PublishChainState, chunk: ThreadChunk) -> PublishChainState:
            try:
                ref = client.create_post(chunk.text, reply=state.reply_ref())
            except Exception as exc:
                logger.error(
                    "Post %d/%d fallido; %d ya publicados quedan online",
                    chunk.index + 1, len(texts), len(state.published),
                )
                raise PublishError(
                    f"Publicación BlueSky fallida en el post {chunk.index + 1}: {exc}",
                    published=state.published,
                    failed_index=chunk.index,
                ) from exc
            logger.info("Post %d/%d publicado: %s", chunk.index + 1, len(texts), ref.uri)
            return state.advance(ref)

        final = reduce(step, to_chunks(texts), PublishChainState())
        return PublishResult(posts=final.published)
