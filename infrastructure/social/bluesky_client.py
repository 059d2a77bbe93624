# infrastructure/social/bluesky_client.py
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import requests
from domain.models import PostRef, ReplyRef

logger = logging.getLogger(__name__)

POST_COLLECTION = "app.bsky.feed.post"

class BlueskyError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

class BlueskyClient:
    """Cliente XRPC mínimo: crear sesión y crear posts (con o sin reply)."""

    def __init__(
        self,
        *,
        service: str = "https://bsky.social",
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base = service.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()
        self._access_jwt: Optional[str] = None
        self._did: Optional[str] = None

    # ───────── HTTP helpers ─────────
    def _url(self, nsid: str) -> str:
        return f"{self.base}/xrpc/{nsid}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._access_jwt:
            headers["Authorization"] = f"Bearer {self._access_jwt}"
        return headers

    def _post(self, nsid: str, json: Dict[str, Any]) -> Dict[str, Any]:
        r = self.http.post(self._url(nsid), headers=self._headers(), json=json, timeout=self.timeout)
        if r.status_code >= 400:
            raise BlueskyError(self._error_text(r), status_code=r.status_code)
        return r.json() if r.text else {}

    @staticmethod
    def _error_text(r: requests.Response) -> str:
        # XRPC responde {"error": "...", "message": "..."}
        try:
            body = r.json()
        except ValueError:
            return f"HTTP {r.status_code}: {r.text or '<vacío>'}"
        msg = body.get("message") or body.get("error") or "error desconocido"
        return f"HTTP {r.status_code}: {msg}"

    # ───────── auth ─────────
    @property
    def logged_in(self) -> bool:
        return bool(self._access_jwt and self._did)

    def login(self, identifier: str, password: str) -> str:
        data = self._post("com.atproto.server.createSession", {"identifier": identifier, "password": password})
        if "accessJwt" not in data or "did" not in data:
            raise BlueskyError(f"Respuesta de sesión inesperada: {sorted(data)}")
        self._access_jwt = data["accessJwt"]
        self._did = data["did"]
        logger.info("Sesión BlueSky abierta para %s", data.get("handle") or identifier)
        return self._did

    # ───────── posts ─────────
    def create_post(self, text: str, reply: ReplyRef | None = None) -> PostRef:
        if not self.logged_in:
            raise BlueskyError("create_post sin sesión; llama antes a login()")
        record: Dict[str, Any] = {
            "$type": POST_COLLECTION,
            "text": text,
            "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if reply is not None:
            record["reply"] = reply.to_dict()
        data = self._post(
            "com.atproto.repo.createRecord",
            {"repo": self._did, "collection": POST_COLLECTION, "record": record},
        )
        return PostRef(uri=data["uri"], cid=data["cid"])
