# interface_adapters/controllers/imap_controller.py
from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from config.settings import Settings
from application.use_cases.fetch_messages_usecase import FetchMessagesUseCase
from interface_adapters.dependencies import ProbeFn, get_fetch_usecase, get_probe, get_settings
from interface_adapters.schemas import MailMessageOut, MessagesResponse

router = APIRouter(prefix="/imap", tags=["imap"])

@router.get("/ping")
def ping(settings: Settings = Depends(get_settings), probe: ProbeFn = Depends(get_probe)):
    if not settings.IMAP_HOST:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Falta IMAP_HOST."})
    result = probe(settings.IMAP_HOST, settings.IMAP_PORT, settings.IMAP_PING_TIMEOUT)
    return result.to_dict()

@router.get("/messages", response_model=MessagesResponse)
def list_messages(
    mailbox: Optional[str] = Query(default=None),
    uc: FetchMessagesUseCase = Depends(get_fetch_usecase),
) -> MessagesResponse:
    folder, messages = uc.fetch_recent(mailbox)
    return MessagesResponse(
        mailbox=folder,
        messages=[
            MailMessageOut(
                id=m.id,
                subject=m.subject,
                receivedAt=m.received_at,
                status=m.status.value,
                sender=m.sender,
                body=m.body,
                attachments=m.attachments,
            )
            for m in messages
        ],
    )
