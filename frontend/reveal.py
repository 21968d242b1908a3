"""One-shot reveal of elements the first time they scroll into view."""
from __future__ import annotations

from typing import Any, Callable

VISIBILITY_THRESHOLD = 0.1


class RevealWatcher:
    """Runs a callback at most once per element, then stops watching it.

    Whoever knows the viewport reports visibility through :meth:`notify`.
    """

    def __init__(self, threshold: float = VISIBILITY_THRESHOLD):
        self.threshold = threshold
        self._watched: dict[int, tuple[Any, Callable[[Any], None]]] = {}

    def observe(self, element: Any, callback: Callable[[Any], None]) -> None:
        self._watched[id(element)] = (element, callback)

    def unobserve(self, element: Any) -> None:
        self._watched.pop(id(element), None)

    def is_watching(self, element: Any) -> bool:
        return id(element) in self._watched

    def notify(self, element: Any, visible_ratio: float) -> bool:
        """Report ``element``'s visible fraction; return True if its callback ran."""
        entry = self._watched.get(id(element))
        if entry is None or visible_ratio < self.threshold:
            return False
        self.unobserve(element)
        entry[1](entry[0])
        return True

    def watched(self) -> list[Any]:
        return [element for element, _ in self._watched.values()]

    def __len__(self) -> int:
        return len(self._watched)
