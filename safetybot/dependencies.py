"""FastAPI dependencies resolving the shared application services.

The services are created once in the application lifespan and stored on
``app.state``; routes receive them through these functions.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from safetybot.config import Settings

if TYPE_CHECKING:
    from safetybot.chat.context import ContextFormatter
    from safetybot.chat.dispatcher import PromptDispatcher
    from safetybot.knowledge.store import KnowledgeStore
    from safetybot.search.service import KnowledgeSearch

_basic = HTTPBasic(auto_error=False, realm="Safety Chatbot")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> KnowledgeStore:
    return request.app.state.store


def get_search(request: Request) -> KnowledgeSearch:
    return request.app.state.search


def get_formatter(request: Request) -> ContextFormatter:
    return request.app.state.formatter


def get_dispatcher(request: Request) -> PromptDispatcher:
    return request.app.state.dispatcher


def require_basic_auth(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Enforce HTTP basic auth when credentials are configured."""
    if not settings.basic_auth_enabled:
        return

    challenge = {"WWW-Authenticate": 'Basic realm="Safety Chatbot"'}
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="認証が必要です", headers=challenge)

    user_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), settings.basic_auth_user.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), settings.basic_auth_password.encode("utf-8")
    )
    if not (user_ok and password_ok):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="認証に失敗しました", headers=challenge)
