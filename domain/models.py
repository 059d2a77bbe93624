# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

class MailStatus(str, Enum):
    NEW = "Nuevo"
    READ = "Leído"

    @classmethod
    def from_flags(cls, flags) -> "MailStatus":
        seen = {f.decode() if isinstance(f, bytes) else str(f) for f in (flags or ())}
        return cls.READ if "\\Seen" in seen else cls.NEW

@dataclass
class MailMessage:
    id: str
    subject: str
    received_at: str
    status: MailStatus
    sender: str
    body: str
    attachments: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.attachments = [a for a in self.attachments if a and a.strip()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "receivedAt": self.received_at,
            "status": self.status.value,
            "from": self.sender,
            "body": self.body,
            "attachments": list(self.attachments),
        }

@dataclass
class ParsedMail:
    subject: str | None
    sender: str | None
    text: str | None
    attachments: list[str] = field(default_factory=list)

@dataclass(frozen=True)
class ThreadChunk:
    index: int
    text: str

@dataclass(frozen=True)
class PostRef:
    uri: str
    cid: str

    def to_dict(self) -> dict[str, str]:
        return {"uri": self.uri, "cid": self.cid}

@dataclass(frozen=True)
class ReplyRef:
    root: PostRef
    parent: PostRef

    def to_dict(self) -> dict[str, Any]:
        return {"root": self.root.to_dict(), "parent": self.parent.to_dict()}

@dataclass(frozen=True)
class PublishChainState:
    """Acumulador del pliegue: root fijo tras el primer post, parent = último publicado."""
    root: PostRef | None = None
    parent: PostRef | None = None
    published: tuple[PostRef, ...] = ()

    def advance(self, ref: PostRef) -> "PublishChainState":
        return PublishChainState(
            root=self.root or ref,
            parent=ref,
            published=self.published + (ref,),
        )

    def reply_ref(self) -> ReplyRef | None:
        if self.root is None or self.parent is None:
            return None
        return ReplyRef(root=self.root, parent=self.parent)

@dataclass(frozen=True)
class PublishResult:
    posts: tuple[PostRef, ...]

@dataclass(frozen=True)
class ProbeResult:
    ok: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True}
        return {"ok": False, "error": self.error}
