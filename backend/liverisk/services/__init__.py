"""
LiveRisk Services

Service layer containing all engine logic.
Each service has a defined interface (contract) and implementation.
"""

from liverisk.services.base import (
    BaseService,
    DispatcherStoppedError,
    InvalidInputError,
    QueueFullError,
    ServiceError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "InvalidInputError",
    "QueueFullError",
    "DispatcherStoppedError",
]
