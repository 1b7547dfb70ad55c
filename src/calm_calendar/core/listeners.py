from __future__ import annotations

import weakref
from typing import Iterator, List, Protocol, runtime_checkable

from ..domain import Event


@runtime_checkable
class CalendarListener(Protocol):
    """Receives synchronous notifications about calendar changes.

    Listeners are held by weak reference, so a class declaring ``__slots__``
    must include ``__weakref__``.
    """

    def on_event_added(self, event: Event) -> None: ...

    def on_event_modified(self, event: Event) -> None: ...


class ListenerRegistry:
    """Ordered set of listeners held by weak reference.

    The calendar never keeps a listener alive; references that have been
    collected are pruned on the next notification.
    """

    def __init__(self) -> None:
        self._refs: List[weakref.ReferenceType] = []

    def __len__(self) -> int:
        return sum(1 for _ in self._alive())

    def __contains__(self, listener: object) -> bool:
        return any(current is listener for current in self._alive())

    def _alive(self) -> Iterator[CalendarListener]:
        for ref in self._refs:
            listener = ref()
            if listener is not None:
                yield listener

    def add(self, listener: CalendarListener) -> None:
        if listener in self:
            return
        try:
            ref = weakref.ref(listener)
        except TypeError as exc:
            raise TypeError(
                f"{type(listener).__name__} cannot be weakly referenced; add __weakref__ to its __slots__"
            ) from exc
        self._refs.append(ref)

    def remove(self, listener: CalendarListener) -> None:
        self._refs = [ref for ref in self._refs if ref() is not None and ref() is not listener]

    def _prune(self) -> None:
        self._refs = [ref for ref in self._refs if ref() is not None]

    def notify_added(self, event: Event) -> None:
        self._prune()
        for listener in list(self._alive()):
            listener.on_event_added(event)

    def notify_modified(self, event: Event) -> None:
        self._prune()
        for listener in list(self._alive()):
            listener.on_event_modified(event)


__all__ = ["CalendarListener", "ListenerRegistry"]
