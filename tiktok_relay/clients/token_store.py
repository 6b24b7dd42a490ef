"""Process-local storage for TikTok token records."""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from tiktok_relay.models.token import TokenRecord


class TokenStore(Protocol):
    """Storage contract the handlers depend on."""

    def get(self, open_id: str) -> Optional[TokenRecord]: ...

    def put(self, record: TokenRecord) -> None: ...

    def items(self) -> list[TokenRecord]: ...


class InMemoryTokenStore:
    """Dictionary-backed token store keyed by ``open_id``.

    Records are replaced wholesale on ``put`` and never evicted; an expired
    record stays readable until the user authenticates again. State lives only
    as long as the process, so this is unsuitable for multi-worker deployments.
    """

    def __init__(self) -> None:
        self._records: Dict[str, TokenRecord] = {}
        self._lock = threading.Lock()

    def get(self, open_id: str) -> Optional[TokenRecord]:
        with self._lock:
            return self._records.get(open_id)

    def put(self, record: TokenRecord) -> None:
        with self._lock:
            self._records[record.open_id] = record

    def items(self) -> list[TokenRecord]:
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["InMemoryTokenStore", "TokenStore"]
