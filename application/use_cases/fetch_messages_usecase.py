# application/use_cases/fetch_messages_usecase.py
from __future__ import annotations
import logging
from typing import Any, Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config.settings import Settings
from domain.errors import ConfigurationError, MailThreadError, ParseError, ProtocolError
from domain.models import MailMessage, MailStatus, ParsedMail
from infrastructure.email.imap_client import IMAPInbox, as_datetime, envelope_subject
from infrastructure.email.message_parser import parse_message

logger = logging.getLogger(__name__)

NO_SUBJECT = "(Sin asunto)"
UNKNOWN = "Desconocido"
DATE_FORMAT = "%d.%m.%Y, %H:%M:%S"

InboxFactory = Callable[[Settings], IMAPInbox]
Parser = Callable[[bytes], ParsedMail]

def default_inbox_factory(settings: Settings) -> IMAPInbox:
    return IMAPInbox(
        settings.IMAP_HOST,
        settings.IMAP_PORT,
        settings.IMAP_USER,
        settings.IMAP_PASS,
        ssl=settings.IMAP_TLS,
        timeout=settings.IMAP_TIMEOUT,
    )

class FetchMessagesUseCase:
    def __init__(
        self,
        settings: Settings,
        *,
        inbox_factory: InboxFactory = default_inbox_factory,
        parser: Parser = parse_message,
    ) -> None:
        self.settings = settings
        self.inbox_factory = inbox_factory
        self.parser = parser
        try:
            self.tz: ZoneInfo | None = ZoneInfo(settings.DISPLAY_TZ)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Zona horaria desconocida '%s'; se usa la local", settings.DISPLAY_TZ)
            self.tz = None

    def _format_date(self, value: Any) -> str:
        dt = as_datetime(value)
        if dt is None:
            return UNKNOWN
        return dt.astimezone(self.tz).strftime(DATE_FORMAT)

    def _to_message(self, item: dict[str, Any]) -> MailMessage:
        parsed = self.parser(item["source"] or b"")
        return MailMessage(
            id=f"uid-{item['uid']}",
            subject=parsed.subject or envelope_subject(item.get("envelope")) or NO_SUBJECT,
            received_at=self._format_date(item.get("internal_date")),
            status=MailStatus.from_flags(item.get("flags")),
            sender=parsed.sender or UNKNOWN,
            body=(parsed.text or "").strip(),
            attachments=parsed.attachments,
        )

    def fetch_recent(self, mailbox: str | None = None) -> tuple[str, list[MailMessage]]:
        """
        Devuelve (buzón, mensajes) con los últimos IMAP_MAX_MESSAGES, del más nuevo al más antiguo.
        La sesión se cierra siempre, también si algo falla por el camino.
        """
        st = self.settings
        if not st.is_imap_configured():
            raise ConfigurationError("Configuración IMAP incompleta.")
        folder = st.resolve_mailbox(mailbox)

        messages: list[MailMessage] = []
        try:
            with self.inbox_factory(st) as inbox:
                inbox.select_folder(folder)
                uids = inbox.search_latest(st.IMAP_MAX_MESSAGES)
                logger.info("IMAP %s: %d mensajes a leer", folder, len(uids))
                for item in inbox.fetch_messages(uids):
                    try:
                        messages.append(self._to_message(item))
                    except ParseError:
                        if not st.IMAP_SKIP_UNPARSEABLE:
                            raise
                        logger.warning("UID=%s ilegible; se omite", item.get("uid"), exc_info=True)
        except MailThreadError:
            raise
        except Exception as exc:
            raise ProtocolError(f"Lectura IMAP fallida en '{folder}': {exc}") from exc

        logger.info("IMAP %s: %d mensajes devueltos", folder, len(messages))
        return folder, messages
