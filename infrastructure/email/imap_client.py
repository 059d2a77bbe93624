# infrastructure/email/imap_client.py
from __future__ import annotations
import logging
from datetime import datetime
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from typing import Any
from imapclient import IMAPClient

logger = logging.getLogger(__name__)

# BODY.PEEK[] no marca el correo como leído; la respuesta llega como BODY[]
FETCH_ITEMS = ["ENVELOPE", "BODY.PEEK[]", "FLAGS", "INTERNALDATE"]

class IMAPInbox:
    """Sesión IMAP de una sola petición. Al salir del `with` siempre hace logout."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        ssl: bool = True,
        timeout: float | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.timeout = timeout
        self.client: IMAPClient | None = None

    def __enter__(self) -> "IMAPInbox":
        self.client = IMAPClient(self.host, port=self.port, ssl=self.ssl, timeout=self.timeout)
        try:
            self.client.login(self.user, self.password)
        except Exception:
            self._logout()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._logout()

    def _logout(self) -> None:
        # un fallo al cerrar se registra pero no tapa el error original
        try:
            if self.client:
                self.client.logout()
        except Exception:
            logger.exception("Error cerrando IMAP")
        finally:
            self.client = None

    def select_folder(self, folder: str) -> None:
        assert self.client
        self.client.select_folder(folder, readonly=True)

    def search_latest(self, limit: int) -> list[int]:
        """Los `limit` UIDs más recientes, del más nuevo al más antiguo."""
        assert self.client
        uids = sorted(self.client.search("ALL"))
        if limit > 0:
            uids = uids[-limit:]
        return list(reversed(uids))

    def fetch_messages(self, uids: list[int]) -> list[dict[str, Any]]:
        """Devuelve uid, envelope, source, flags e internal_date respetando el orden de `uids`."""
        assert self.client
        if not uids:
            return []
        resp = self.client.fetch(uids, FETCH_ITEMS)
        out: list[dict[str, Any]] = []
        for uid in uids:
            data = resp.get(uid)
            if data is None:
                logger.warning("UID=%s no devuelto por el servidor (¿borrado?)", uid)
                continue
            out.append({
                "uid": uid,
                "envelope": data.get(b"ENVELOPE"),
                "source": data.get(b"BODY[]") or data.get(b"RFC822"),
                "flags": data.get(b"FLAGS", ()),
                "internal_date": data.get(b"INTERNALDATE"),
            })
        return out

def envelope_subject(envelope) -> str | None:
    subject = getattr(envelope, "subject", None)
    if subject is None:
        return None
    if isinstance(subject, bytes):
        subject = subject.decode("utf-8", errors="replace")
    try:
        # palabras codificadas RFC 2047 (=?utf-8?Q?...?=)
        subject = str(make_header(decode_header(subject)))
    except (HeaderParseError, UnicodeDecodeError, LookupError, ValueError):
        logger.warning("Asunto de ENVELOPE no decodificable: %r", subject)
    return subject or None

def as_datetime(value) -> datetime | None:
    return value if isinstance(value, datetime) else None
