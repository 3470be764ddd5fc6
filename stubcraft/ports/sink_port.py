from abc import abstractmethod
from typing import Any, Protocol


class ByteSink(Protocol):
    """Port interface for the destination of generated test source."""

    @abstractmethod
    def write(self, data: bytes) -> Any:
        """Write ``data``; failures are raised to the caller unchanged."""
        pass
