"""
Base Service Interface

Metrics and suggestion services share this contract so the dispatcher can
drive them and report their health the same way.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    One recomputation stage of the risk pipeline.

    Stages are pure: execute() derives its output from its input alone,
    and health_check() reports whether the configured parameters are usable.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Stage name, used in logs and /health."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Run the stage over the latest snapshot.

        Raises:
            ServiceError: If the stage cannot produce an output
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


class ServiceError(Exception):
    """Error raised by an engine component, tagged with its name."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class InvalidInputError(ServiceError):
    """Rejected input: bad price, unknown symbol or duplicate seed."""
    pass


class QueueFullError(ServiceError):
    """Tick queue has no free slot."""
    pass


class DispatcherStoppedError(ServiceError):
    """Tick was still queued when the dispatcher stopped and was never applied."""
    pass
