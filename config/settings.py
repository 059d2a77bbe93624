# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()

@dataclass(frozen=True)
class Settings:
    # IMAP
    IMAP_HOST: str = os.getenv("IMAP_HOST", "")
    IMAP_PORT: int = int(os.getenv("IMAP_PORT", 993))
    IMAP_TLS: bool = os.getenv("IMAP_TLS", "true").lower() == "true"
    IMAP_USER: str = os.getenv("IMAP_USER", "")
    IMAP_PASS: str = os.getenv("IMAP_PASS", "")
    IMAP_MAILBOX: str = os.getenv("IMAP_MAILBOX", "INBOX")
    IMAP_MAX_MESSAGES: int = int(os.getenv("IMAP_MAX_MESSAGES", 20))
    IMAP_TIMEOUT: float = float(os.getenv("IMAP_TIMEOUT", 30))
    IMAP_PING_TIMEOUT: float = float(os.getenv("IMAP_PING_TIMEOUT", 5))
    # false -> un correo ilegible aborta todo el lote
    IMAP_SKIP_UNPARSEABLE: bool = os.getenv("IMAP_SKIP_UNPARSEABLE", "true").lower() == "true"

    # BLUESKY
    BLUESKY_HOST: str = os.getenv("BLUESKY_HOST", "https://bsky.social")
    BLUESKY_HANDLE: str = os.getenv("BLUESKY_HANDLE", "")
    BLUESKY_APP_PASSWORD: str = os.getenv("BLUESKY_APP_PASSWORD", "")
    BLUESKY_TIMEOUT: float = float(os.getenv("BLUESKY_TIMEOUT", 30))

    # Hilo / presentación
    THREAD_MAX_LENGTH: int = int(os.getenv("THREAD_MAX_LENGTH", 300))
    DISPLAY_TZ: str = os.getenv("DISPLAY_TZ", "Europe/Berlin")

    # Dashboard
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Servidor HTTP
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8080))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ───────── helpers ─────────
    def is_imap_configured(self) -> bool:
        return bool(self.IMAP_HOST and self.IMAP_USER and self.IMAP_PASS)

    def is_bluesky_configured(self) -> bool:
        return bool(self.BLUESKY_HANDLE and self.BLUESKY_APP_PASSWORD)

    def is_admin_configured(self) -> bool:
        return bool(self.ADMIN_EMAIL and self.ADMIN_PASSWORD)

    def resolve_mailbox(self, requested: str | None) -> str:
        """Buzón pedido (sin espacios) o, si viene vacío, el configurado."""
        name = (requested or "").strip()
        return name or self.IMAP_MAILBOX

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        return [o.strip() for o in raw.split(",") if o.strip()]
