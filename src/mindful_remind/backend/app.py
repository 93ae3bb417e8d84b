# src/mindful_remind/backend/app.py

"""
REST/JSON surface of the record store.

Routes (all under /api):
- GET/POST /users, DELETE /users/{id} (403 for the root admin)
- GET /reminders?userId=..., GET /reminders/all
- POST /reminders, PUT/DELETE /reminders/{id}

Errors are always JSON bodies of the form {"error": "..."}.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import Forbidden
from ..core.models import Role
from .store import RecordStore

logger = logging.getLogger(__name__)


class UserIn(BaseModel):
    id: str
    username: str
    role: str = Role.USER.value
    createdAt: Optional[int] = None


class ReminderIn(BaseModel):
    id: str
    userId: str
    title: str = ""
    description: str = ""
    dueDate: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    completed: bool = False
    createdAt: Optional[int] = None


class ReminderUpdate(BaseModel):
    title: str = ""
    description: str = ""
    dueDate: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    completed: bool = False


OK = {"success": True}


def create_app(store: RecordStore) -> FastAPI:
    app = FastAPI(title="mindful-remind record store")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- error mapping ----

    @app.exception_handler(Forbidden)
    async def _forbidden(request: Request, exc: Forbidden) -> JSONResponse:
        logger.info("Refused %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=403, content={"error": exc.message})

    @app.exception_handler(sqlite3.Error)
    async def _storage_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        path = request.url.path
        # Unknown /api routes (including a known path with the wrong method) are 404s.
        if path.startswith("/api") and exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": f"{request.method} {path} not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    # ---- routes ----

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    @app.get("/api/users")
    def list_users() -> list[dict]:
        return store.list_users()

    @app.post("/api/users")
    def save_user(body: UserIn) -> dict:
        store.insert_user(id=body.id, username=body.username, role=body.role, createdAt=body.createdAt)
        return OK

    @app.delete("/api/users/{user_id}")
    def delete_user(user_id: str) -> dict:
        store.delete_user(user_id)
        return OK

    @app.get("/api/reminders")
    def list_reminders(userId: Optional[str] = None):
        if not userId:
            return JSONResponse(status_code=400, content={"error": "userId required"})
        return store.list_reminders(userId)

    @app.get("/api/reminders/all")
    def list_all_reminders() -> list[dict]:
        return store.list_all_reminders()

    @app.post("/api/reminders")
    def add_reminder(body: ReminderIn) -> dict:
        store.insert_reminder(body.model_dump())
        return OK

    @app.put("/api/reminders/{reminder_id}")
    def update_reminder(reminder_id: str, body: ReminderUpdate) -> dict:
        # An unknown id is still a 200; `changes` tells the client nothing matched.
        changes = store.update_reminder(reminder_id, body.model_dump())
        return {**OK, "changes": changes}

    @app.delete("/api/reminders/{reminder_id}")
    def delete_reminder(reminder_id: str) -> dict:
        store.delete_reminder(reminder_id)
        return OK

    return app
