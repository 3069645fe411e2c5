"""Base classes for cataloger plugins."""

from abc import ABC, abstractmethod
from typing import List

from ..models import Package
from ..resolver import Resolver


class CatalogerError(RuntimeError):
    """Raised when a cataloger cannot run at all."""


class Cataloger(ABC):
    """Contract for catalogers that discover packages through a resolver."""

    name: str = ""

    @abstractmethod
    def catalog(self, resolver: Resolver) -> List[Package]:
        """Return every package found through ``resolver``, in discovery order."""
