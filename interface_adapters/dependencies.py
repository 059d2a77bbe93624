# interface_adapters/dependencies.py
from __future__ import annotations
from typing import Callable
from fastapi import Request

from config.settings import Settings
from domain.models import ProbeResult
from application.use_cases.fetch_messages_usecase import FetchMessagesUseCase
from application.use_cases.publish_thread_usecase import PublishThreadUseCase

ProbeFn = Callable[[str, int, float], ProbeResult]

def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"'{name}' no inicializado en app.state")
    return value

def get_settings(request: Request) -> Settings:
    return _state(request, "settings")

def get_probe(request: Request) -> ProbeFn:
    return _state(request, "probe")

def get_fetch_usecase(request: Request) -> FetchMessagesUseCase:
    return _state(request, "fetch_uc")

def get_publish_usecase(request: Request) -> PublishThreadUseCase:
    return _state(request, "publish_uc")
