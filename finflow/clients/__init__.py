"""Expose constructed client wrappers."""

from .intent_client import (
    HttpIntentClient,
    IntentClassificationError,
    IntentClient,
    LocalIntentClient,
)

__all__ = [
    "HttpIntentClient",
    "IntentClassificationError",
    "IntentClient",
    "LocalIntentClient",
]
