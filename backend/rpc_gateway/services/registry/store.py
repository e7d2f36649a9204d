from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class EndpointRegistry(ABC):
    """
    Shared store holding the configured endpoint universe and the currently
    healthy subset. Both values are only ever replaced as whole lists, so a
    reader sees either the previous complete list or the next one.
    """

    @abstractmethod
    async def get_universe(self) -> List[str]:
        pass

    @abstractmethod
    async def get_healthy(self) -> List[str]:
        pass

    @abstractmethod
    async def put_healthy(self, endpoints: List[str]) -> None:
        pass

    @abstractmethod
    async def put_universe(self, endpoints: List[str]) -> None:
        pass

    async def close(self) -> None:
        return
