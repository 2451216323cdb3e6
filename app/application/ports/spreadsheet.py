from abc import ABC, abstractmethod
from typing import Any


class SpreadsheetPort(ABC):
    @abstractmethod
    def append_row(self, values: list[Any]) -> bool:
        """Append one row of scalars. Returns True if the row was written."""
        raise NotImplementedError
