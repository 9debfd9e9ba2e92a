"""
Abstract base parser class for all parsers.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any


class BaseParser(ABC):
    """Abstract base class for all parsers."""

    def __init__(self):
        """Initialize the parser."""
        self._cache: dict[str, Any] = {}

    def clear_cache(self) -> None:
        """Clear the parser cache."""
        self._cache.clear()

    @abstractmethod
    def parse(self, content: str) -> Any:
        """
        Parse content and return the parsed structure.

        Args:
            content: The content to parse

        Returns:
            Parsed data

        Raises:
            StatementParsingError: If parsing fails
        """
        pass

    def _get_cache_key(self, content: str) -> str:
        """Generate a cache key for the given content."""
        return str(hash(content))

    def _get_from_cache(self, cache_key: str) -> Any:
        """
        Get parsed data from cache.

        Parsed structures are mutable and handed to observers, so callers
        always receive their own copy.
        """
        if cache_key not in self._cache:
            return None
        return copy.deepcopy(self._cache[cache_key])

    def _set_cache(self, cache_key: str, data: Any) -> None:
        """Store parsed data in cache."""
        self._cache[cache_key] = copy.deepcopy(data)
