# domain/errors.py
from __future__ import annotations
from domain.models import PostRef

class MailThreadError(Exception):
    """Base de todos los errores del pipeline correo -> hilo."""

class ConfigurationError(MailThreadError):
    """Falta host o credenciales; se detecta antes de tocar la red."""

class ProtocolError(MailThreadError):
    """Fallo de sesión IMAP: connect/select/search/fetch."""

class ParseError(MailThreadError):
    """Fuente RFC822 ilegible."""

class AuthError(MailThreadError):
    """Login rechazado por la red social."""

class ThreadValidationError(MailThreadError):
    """Hilo vacío o con formato inválido."""

class PublishError(MailThreadError):
    def __init__(self, message: str, *, published: tuple[PostRef, ...] = (), failed_index: int = 0) -> None:
        super().__init__(message)
        self.published = published
        self.failed_index = failed_index
