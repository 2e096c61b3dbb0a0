"""
Alternative-Instrument Mapper

Static lookup from symbol to substitute symbols.
Unknown symbols fall back to broad-market proxies.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from liverisk.core.config import Settings, get_settings

# Reference table
DEFAULT_ALTERNATIVES = {
    "AAPL": ("MSFT", "GOOGL"),
    "MSFT": ("AAPL", "GOOGL"),
    "TSLA": ("NIO", "RIVN"),
    "GOOGL": ("META", "AAPL"),
}

DEFAULT_FALLBACK = ("SPY", "QQQ")


class AlternativeMapper:
    """Immutable symbol -> substitutes table. Lookups never fail."""

    def __init__(
        self,
        mapping: Optional[Mapping[str, Sequence[str]]] = None,
        default: Optional[Sequence[str]] = None,
    ):
        if mapping is None:
            mapping = DEFAULT_ALTERNATIVES
        self._table = MappingProxyType(
            {symbol.strip().upper(): tuple(alts) for symbol, alts in mapping.items()}
        )
        self._default = tuple(DEFAULT_FALLBACK if default is None else default)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AlternativeMapper":
        settings = settings or get_settings()
        return cls(settings.alternatives, settings.default_alternatives)

    @property
    def default(self) -> list[str]:
        return list(self._default)

    def lookup(self, symbol) -> list[str]:
        """Substitutes for symbol, or the default list if it has none."""
        if isinstance(symbol, str):
            alternatives = self._table.get(symbol.strip().upper())
            if alternatives is not None:
                return list(alternatives)
        return list(self._default)

    def __contains__(self, symbol) -> bool:
        return isinstance(symbol, str) and symbol.strip().upper() in self._table
