"""Expose dependency helpers for FastAPI routers."""

from .clients import get_flow_orchestrator, get_flow_session_store, get_intent_client
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_flow_orchestrator",
    "get_flow_session_store",
    "get_intent_client",
]
