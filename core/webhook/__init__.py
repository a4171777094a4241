"""
Digiflazz 交易回调接收模块
"""

from .handler import WebhookHandler
from .sink import InMemoryTransactionSink, TransactionEventSink, TransactionRecord
from .verifier import EVENT_HEADER, SIGNATURE_HEADER, WebhookVerifier, compute_signature

__all__ = [
    "WebhookHandler",
    "InMemoryTransactionSink",
    "TransactionEventSink",
    "TransactionRecord",
    "WebhookVerifier",
    "compute_signature",
    "SIGNATURE_HEADER",
    "EVENT_HEADER",
]
