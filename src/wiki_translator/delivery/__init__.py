"""
Livraison côté client : remplissage progressif d'un squelette déjà servi.

Organisation du module :
- transport.py : Transports de batch (HTTP via requests, ou local)
- scheduler.py : DeliveryScheduler (pool borné, retries, isolation par batch)
"""

from .transport import (
    BatchTransport,
    HttpBatchTransport,
    LocalBatchTransport,
    iter_sections,
)
from .scheduler import BatchState, DeliveryBatch, DeliveryReport, DeliveryScheduler

__all__ = [
    "BatchTransport",
    "HttpBatchTransport",
    "LocalBatchTransport",
    "iter_sections",
    "BatchState",
    "DeliveryBatch",
    "DeliveryReport",
    "DeliveryScheduler",
]
