"""Request dependencies resolved from application state."""

from fastapi import Request

from lumina.agent.chat_agent import CompletionSourceFactory
from lumina.agent.config import ChatSettings
from lumina.sessions.store import SessionStore


def get_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_completion_factory(request: Request) -> CompletionSourceFactory:
    return request.app.state.completion_factory


def get_settings(request: Request) -> ChatSettings:
    return request.app.state.chat_settings
