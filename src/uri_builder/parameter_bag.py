"""Ordered Query Parameter Container

This module provides the key/value container that backs the query
component of a URI builder.
"""

from typing import Any, Dict, Iterator, Optional


class ParameterBag:
    """An ordered mapping of query parameter names to values

    New keys are appended; setting an existing key replaces its value
    without moving it.
    """

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        self.parameters: Dict[str, Any] = dict(parameters) if parameters else {}

    @classmethod
    def from_string(cls, query: str) -> 'ParameterBag':
        """Create a bag from a raw query string

        Format: `key=value&key2=value2`
        Values are kept as undecoded strings
        A key without `=` gets an empty value
        Empty segments (`a=1&&b=2`) are skipped
        A repeated key keeps its first position and its last value
        """
        bag = cls()
        for segment in query.split('&'):
            if not segment:
                continue
            key, _, value = segment.partition('=')
            bag.set(key, value)
        return bag

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value for a key, or default if it is missing"""
        return self.parameters.get(key, default)

    def set(self, key: str, value: Any) -> 'ParameterBag':
        """Add or update a key; an existing key keeps its position"""
        self.parameters[key] = value
        return self

    def has(self, key: str) -> bool:
        """Check if a key is present"""
        return key in self.parameters

    def remove(self, key: str) -> 'ParameterBag':
        """Remove a key if present"""
        self.parameters.pop(key, None)
        return self

    def all(self) -> Dict[str, Any]:
        """Get a snapshot of every key/value pair in insertion order"""
        return dict(self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)

    def __contains__(self, key: object) -> bool:
        return key in self.parameters

    def __iter__(self) -> Iterator[str]:
        return iter(self.parameters)

    def __repr__(self) -> str:
        return f"ParameterBag({self.parameters!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterBag):
            return False
        return list(self.parameters.items()) == list(other.parameters.items())

    __hash__ = None  # type: ignore[assignment]
