# infrastructure/email/message_parser.py
from __future__ import annotations
import logging
import html2text
import pyzmail
from domain.errors import ParseError
from domain.models import ParsedMail

logger = logging.getLogger(__name__)

def _decode_part(part) -> str:
    payload = part.get_payload()
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    charset = part.charset or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        # charset desconocido en la cabecera
        return payload.decode("utf-8", errors="replace")

def _html_to_text(raw_html: str) -> str:
    # texto plano para publicar: sin enlaces markdown, imágenes ni énfasis
    converter = html2text.HTML2Text()
    converter.ignore_links = True
    converter.ignore_images = True
    converter.ignore_emphasis = True
    converter.body_width = 0  # sin cortes de línea
    return converter.handle(raw_html)

def _format_sender(msg) -> str | None:
    addrs = msg.get_addresses("from")
    if not addrs:
        return None
    name, addr = addrs[0]
    if name and addr:
        return f"{name} <{addr}>"
    return name or addr or None

def parse_message(raw: bytes) -> ParsedMail:
    """Fuente RFC822 -> asunto, remitente legible, texto plano y nombres de adjuntos."""
    if not raw:
        raise ParseError("Fuente del mensaje vacía")
    try:
        msg = pyzmail.PyzMessage.factory(raw)

        if msg.text_part is not None:
            text = _decode_part(msg.text_part)
        elif msg.html_part is not None:
            text = _html_to_text(_decode_part(msg.html_part))
        else:
            text = ""

        attachments: list[str] = []
        for part in msg.mailparts:
            if part.is_body:
                continue
            if part.filename and part.filename.strip():
                attachments.append(part.filename)

        return ParsedMail(
            subject=msg.get_subject() or None,
            sender=_format_sender(msg),
            text=text.strip(),
            attachments=attachments,
        )
    except Exception as exc:
        raise ParseError(f"No se pudo parsear el mensaje: {exc}") from exc
