"""In-process snapshot adapter."""

import json
from typing import Any

from knowledge_engine.core.store.base import SnapshotAdapter


class InMemorySnapshotAdapter(SnapshotAdapter):
    """
    Keeps serialized payloads in a dict.

    Payloads are stored as JSON text, so callers can never mutate stored
    state through a returned object.
    """

    def __init__(self):
        self._payloads: dict[str, str] = {}

    async def read(self, user_id: str) -> dict[str, Any] | None:
        raw = self._payloads.get(user_id)
        if raw is None:
            return None
        return json.loads(raw)

    async def write(self, user_id: str, payload: dict[str, Any]) -> None:
        self._payloads[user_id] = json.dumps(payload)
