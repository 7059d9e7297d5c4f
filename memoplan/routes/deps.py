from __future__ import annotations

from fastapi import HTTPException, Request

from ..db import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="storage_not_ready")
    return storage
