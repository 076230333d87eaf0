"""
Document store layer.

All backend reads, writes and subscriptions live here and ONLY here.
"""

from tracker.store.base import (
    AuthFailure,
    Document,
    DocumentStore,
    StoreError,
    Subscription,
    SubscriptionError,
    WriteFailure,
    private_collection,
    public_collection,
)
from tracker.store.memory import MemoryDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "Subscription",
    "MemoryDocumentStore",
    "StoreError",
    "AuthFailure",
    "SubscriptionError",
    "WriteFailure",
    "private_collection",
    "public_collection",
]
