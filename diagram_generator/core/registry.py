"""
Symbol Registry - name to model object map shared by both diagram kinds
"""
import logging
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class SymbolRegistry:
    """
    Maps declared names to model objects.

    Registering a name that already exists overwrites the slot; the objects
    themselves stay wherever the caller keeps them. Names that were only
    referenced (never declared) can be filled with a stub through
    ``resolve_or_stub``.
    """

    def __init__(self, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self._symbols: Dict[str, Any] = {}

    def _key(self, name: str) -> str:
        return name if self.case_sensitive else name.lower()

    def register(self, name: str, obj: Any) -> None:
        """Bind name to obj, replacing any earlier binding"""
        key = self._key(name)
        if key in self._symbols and self._symbols[key] is not obj:
            logger.debug(f"Symbol '{name}' redeclared, registry slot overwritten")
        self._symbols[key] = obj

    def get(self, name: Optional[str]) -> Optional[Any]:
        if name is None:
            return None
        return self._symbols.get(self._key(name))

    def unregister(self, name: str, obj: Any = None) -> None:
        """
        Drop the binding for name.

        When obj is given the binding is only dropped if it still points to obj,
        so removing an overwritten duplicate leaves the newer binding alone.
        """
        key = self._key(name)
        if key not in self._symbols:
            return
        if obj is not None and self._symbols[key] is not obj:
            return
        del self._symbols[key]

    def resolve_or_stub(self, name: str, factory: Callable[[str], Any]) -> Tuple[Any, bool]:
        """
        Look up name, creating and registering factory(name) when it is missing.

        Returns:
            Tuple of (object, created flag)
        """
        existing = self.get(name)
        if existing is not None:
            return existing, False

        stub = factory(name)
        self._symbols[self._key(name)] = stub
        logger.debug(f"Created stub for undeclared symbol '{name}'")
        return stub, True

    def clear(self) -> None:
        self._symbols.clear()

    def __contains__(self, name: str) -> bool:
        return self._key(name) in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._symbols.values())

    def __repr__(self):
        return f"SymbolRegistry(symbols={len(self._symbols)})"
