"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from finflow.clients import HttpIntentClient, IntentClient, LocalIntentClient
from finflow.core.config import get_settings
from finflow.services import FlowOrchestrator, FlowSessionStore


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_intent_client() -> IntentClient:
    """Use the remote intent service when configured, else classify in process."""
    settings = _settings()
    if settings.intent_service.base_url:
        return HttpIntentClient(settings.intent_service)
    return LocalIntentClient()


@lru_cache()
def get_flow_session_store() -> FlowSessionStore:
    """Provide the process-wide flow session store."""
    settings = _settings()
    return FlowSessionStore(
        db_path=settings.session.db_path,
        ttl_seconds=settings.session.ttl_seconds,
    )


def get_flow_orchestrator() -> FlowOrchestrator:
    """Build a flow orchestrator over the shared store and intent client."""
    return FlowOrchestrator(
        store=get_flow_session_store(),
        intent_client=get_intent_client(),
        summary_field_limit=_settings().summary_field_limit,
    )


__all__ = [
    "get_flow_orchestrator",
    "get_flow_session_store",
    "get_intent_client",
]
