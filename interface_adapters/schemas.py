# interface_adapters/schemas.py
from __future__ import annotations
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

# ───────── errores ─────────
class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

# ───────── health ─────────
class ImapInfo(BaseModel):
    host: str
    port: int
    mailbox: str
    tls: bool
    userConfigured: bool

class BlueskyInfo(BaseModel):
    host: str
    handleConfigured: bool

class HealthResponse(BaseModel):
    ok: bool = True
    imapConfigured: bool
    blueSkyConfigured: bool
    adminConfigured: bool
    imap: ImapInfo
    bluesky: BlueskyInfo

# ───────── IMAP ─────────
class MailMessageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    subject: str
    receivedAt: str
    status: str
    sender: str = Field(alias="from")
    body: str
    attachments: List[str] = []

class MessagesResponse(BaseModel):
    mailbox: str
    messages: List[MailMessageOut] = []

# ───────── BlueSky / hilo ─────────
class PublishRequest(BaseModel):
    # sin tipar: un hilo que no sea lista debe dar 400, no 422
    thread: Any = None

class PublishResponse(BaseModel):
    ok: bool = True
    posts: List[str] = []

class PreviewRequest(BaseModel):
    text: str = ""
    maxLength: Optional[int] = Field(default=None, gt=0)

class PreviewResponse(BaseModel):
    thread: List[str] = []
