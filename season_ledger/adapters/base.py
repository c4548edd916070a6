"""Abstract base adapter for loading a season ledger from a data source."""

from abc import ABC, abstractmethod

from season_ledger.core.models import Ledger


class BaseAdapter(ABC):
    @abstractmethod
    def parse(self, data_path: str) -> Ledger:
        """Load the data file and return a read-only Ledger.

        Raises ParseError (or a subclass) when no valid ledger can be built.
        """
        pass
