"""Historial de cálculos en memoria (el más reciente primero)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryItem:
    expression: str
    result: str

    def __str__(self):
        return f"{self.expression} = {self.result}"


class CalculationHistory:
    """Lista acotada de cálculos correctos; no se persiste."""

    def __init__(self, limit: int | None = None):
        if limit is not None and limit < 1:
            raise ValueError("El límite del historial debe ser al menos 1")
        self._limit = limit
        self._items: list[HistoryItem] = []

    @property
    def limit(self) -> int | None:
        return self._limit

    def add(self, expression: str, result: str) -> HistoryItem:
        item = HistoryItem(expression, result)
        self._items.insert(0, item)
        if self._limit is not None:
            del self._items[self._limit:]
        return item

    def get(self, index: int) -> HistoryItem:
        """Devuelve la entrada ``index`` (0 = la más reciente).

        Raises:
            IndexError: no hay entrada en esa posición.
        """
        if not 0 <= index < len(self._items):
            raise IndexError(f"No hay entrada {index} en el historial")
        return self._items[index]

    def items(self) -> list[HistoryItem]:
        return list(self._items)

    def clear(self):
        self._items.clear()

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))
