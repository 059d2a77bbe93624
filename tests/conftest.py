"""Fixtures compartidos: configuración, IMAP en memoria y cliente social falso."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from email.message import EmailMessage
from types import SimpleNamespace
from typing import Any, Iterable

import pytest

from config.settings import Settings
from domain.models import PostRef, ReplyRef
import infrastructure.email.imap_client as imap_module


def build_raw(
    subject: str | None = "Nota de prensa",
    sender: str | None = "Ana Perez <ana@example.com>",
    body: str = "Texto del correo.",
    html: str | None = None,
    attachments: Iterable[tuple[str | None, bytes]] = (),
) -> bytes:
    """Construye la fuente RFC822 de un correo de prueba."""
    msg = EmailMessage()
    if subject is not None:
        msg["Subject"] = subject
    if sender is not None:
        msg["From"] = sender
    msg["To"] = "redaccion@example.com"
    if html is not None and not body:
        msg.set_content(html, subtype="html")
    else:
        msg.set_content(body)
        if html is not None:
            msg.add_alternative(html, subtype="html")
    for name, data in attachments:
        if name:
            msg.add_attachment(data, maintype="application", subtype="octet-stream", filename=name)
        else:
            msg.add_attachment(data, maintype="application", subtype="octet-stream")
    return msg.as_bytes()


@pytest.fixture
def settings() -> Settings:
    """Configuración completa (IMAP + BlueSky) sin depender del entorno."""
    return Settings(
        IMAP_HOST="imap.example.com",
        IMAP_PORT=993,
        IMAP_TLS=True,
        IMAP_USER="redaccion@example.com",
        IMAP_PASS="secreto",
        IMAP_MAILBOX="INBOX",
        IMAP_MAX_MESSAGES=20,
        IMAP_TIMEOUT=10,
        IMAP_PING_TIMEOUT=5,
        IMAP_SKIP_UNPARSEABLE=True,
        BLUESKY_HOST="https://bsky.example",
        BLUESKY_HANDLE="redaccion.bsky.social",
        BLUESKY_APP_PASSWORD="abcd-efgh-ijkl-mnop",
        BLUESKY_TIMEOUT=10,
        THREAD_MAX_LENGTH=300,
        DISPLAY_TZ="UTC",
        ADMIN_EMAIL="",
        ADMIN_PASSWORD="",
        CORS_ORIGINS="*",
    )


# ---------- IMAP en memoria ----------


@dataclass
class FakeMailbox:
    """Estado del servidor IMAP falso: mensajes por UID y registro de llamadas."""

    messages: dict[int, dict[bytes, Any]] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)
    fail_on: str | None = None
    logout_error: Exception | None = None
    missing_uids: set[int] = field(default_factory=set)

    def add(self, uid: int, raw: bytes, *, seen: bool = False, envelope_subject: bytes | None = None) -> None:
        base = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
        self.messages[uid] = {
            b"BODY[]": raw,
            b"FLAGS": (b"\\Seen",) if seen else (),
            b"INTERNALDATE": base + timedelta(minutes=uid),
            b"ENVELOPE": SimpleNamespace(subject=envelope_subject),
        }


class FakeIMAPClient:
    """Sustituto de imapclient.IMAPClient que sirve un FakeMailbox."""

    mailbox: FakeMailbox

    def __init__(self, host: str, port: int = 993, ssl: bool = True, timeout: float | None = None) -> None:
        self.mailbox.calls.append(("connect", host, port, ssl, timeout))
        self._maybe_fail("connect")

    def _maybe_fail(self, op: str) -> None:
        if self.mailbox.fail_on == op:
            raise OSError(f"{op} failed")

    def login(self, user: str, password: str) -> None:
        self.mailbox.calls.append(("login", user))
        self._maybe_fail("login")

    def select_folder(self, folder: str, readonly: bool = False) -> None:
        self.mailbox.calls.append(("select", folder, readonly))
        self._maybe_fail("select")

    def search(self, criteria: Any = "ALL") -> list[int]:
        self.mailbox.calls.append(("search", criteria))
        self._maybe_fail("search")
        # el servidor no garantiza orden
        return list(reversed(sorted(self.mailbox.messages)))

    def fetch(self, uids: list[int], items: list[str]) -> dict[int, dict[bytes, Any]]:
        self.mailbox.calls.append(("fetch", list(uids), list(items)))
        self._maybe_fail("fetch")
        return {
            uid: self.mailbox.messages[uid]
            for uid in sorted(uids)
            if uid in self.mailbox.messages and uid not in self.mailbox.missing_uids
        }

    def logout(self) -> None:
        self.mailbox.calls.append(("logout",))
        if self.mailbox.logout_error is not None:
            raise self.mailbox.logout_error


@pytest.fixture
def fake_mailbox(monkeypatch: pytest.MonkeyPatch) -> FakeMailbox:
    """Sustituye IMAPClient por un servidor en memoria y devuelve su estado."""
    mailbox = FakeMailbox()
    client_cls = type("BoundFakeIMAPClient", (FakeIMAPClient,), {"mailbox": mailbox})
    monkeypatch.setattr(imap_module, "IMAPClient", client_cls)
    return mailbox


# ---------- cliente social falso ----------


class FakeSocialClient:
    """Registra login y posts; falla en el texto indicado por `fail_on`."""

    def __init__(self, fail_on: str | None = None, login_error: Exception | None = None) -> None:
        self.fail_on = fail_on
        self.login_error = login_error
        self.calls: list[tuple] = []
        self.posts: list[tuple[str, ReplyRef | None, PostRef]] = []

    def login(self, identifier: str, password: str) -> str:
        self.calls.append(("login", identifier))
        if self.login_error is not None:
            raise self.login_error
        return "did:plc:redaccion"

    def create_post(self, text: str, reply: ReplyRef | None = None) -> PostRef:
        self.calls.append(("post", text))
        if text == self.fail_on:
            raise RuntimeError(f"rate limited on {text!r}")
        n = len(self.posts)
        ref = PostRef(uri=f"at://did:plc:redaccion/app.bsky.feed.post/{n}", cid=f"cid{n}")
        self.posts.append((text, reply, ref))
        return ref

    def ref_for(self, text: str) -> PostRef:
        return next(ref for t, _, ref in self.posts if t == text)

    def reply_for(self, text: str) -> ReplyRef | None:
        return next(reply for t, reply, _ in self.posts if t == text)


@pytest.fixture
def social_client() -> FakeSocialClient:
    return FakeSocialClient()
