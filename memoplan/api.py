"""
FastAPI app entry point aggregating the memo and plan routers under memoplan/routes.
Keep as `uvicorn memoplan.api:app`.
"""
from __future__ import annotations


from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .db import Storage
from .logs import configure_logging


app = FastAPI(title="memoplan-api", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:1420",
        "http://127.0.0.1:1420",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "tauri://localhost",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    configure_logging()
    # 打不开数据库时直接让启动失败（StorageUnavailable）
    if getattr(app.state, "storage", None) is None:
        app.state.storage = Storage.open()


@app.on_event("shutdown")
def on_shutdown():
    storage = getattr(app.state, "storage", None)
    if storage is not None:
        storage.close()
        app.state.storage = None


# Include routers (split by entity)
from .routes import base as base_routes
from .routes import memos as memo_routes
from .routes import plans as plan_routes

app.include_router(base_routes.router)
app.include_router(memo_routes.router)
app.include_router(plan_routes.router)
