"""Key-combo dispatch tables built from keymap actions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding; the first binding claiming a combo keeps it."""
        for combo in binding.combos:
            self._handlers.setdefault(self._normalize(combo), binding.handler)
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def bind(self, combos: Iterable[str], handler: Callable[[], bool | None]) -> KeyComboRegistry:
        return self.register_binding(KeyComboBinding(tuple(combos), handler))

    def handles(self, key: str) -> bool:
        return self._normalize(key) in self._handlers

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key`` and return its handled result.

        Returns ``None`` when no binding matches.
        """
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return None
        return handler()
