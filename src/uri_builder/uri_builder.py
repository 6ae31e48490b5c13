"""Fluent URI Builder

This module provides a mutable builder that assembles a URI from its
scheme, host, port, path, query and fragment, and parses an existing URI
string back into those parts.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote_plus, urlsplit

from .parameter_bag import ParameterBag

logger = logging.getLogger(__name__)


# Error classes
class UriBuilderError(Exception):
    """Base exception for URI builder errors"""
    pass


class InvalidUriReason(Enum):
    """Why a string was rejected by `UriBuilder.from_string`"""
    UNPARSEABLE = "unparseable"
    MISSING_SCHEME = "missing_scheme"
    MISSING_HOST = "missing_host"


class InvalidUriError(UriBuilderError):
    """String cannot be decomposed into at least a scheme and a host"""
    def __init__(self, uri: str, reason: InvalidUriReason, detail: str = ""):
        self.uri = uri
        self.reason = reason
        message = f"URI failed to parse ({reason.value}), please ensure it is a valid URL: '{uri}'"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class InvalidArgumentError(UriBuilderError):
    """Setter called with a missing or unsupported value"""
    pass


# Value types accepted by UriBuilder.set_query_param; bool is covered by int
QUERY_VALUE_TYPES = (str, int, float, list, tuple, Mapping)


class UriBuilder:
    """A URI under construction

    Examples:
    - `UriBuilder.build().set_scheme("https").set_host("api.com").set_path("v1")`
    - `UriBuilder.from_string("https://api.com:9000/v1?page=2#top")`

    Setters mutate the builder in place and return it for chaining.
    """

    def __init__(self, query: ParameterBag, scheme: str = "", host: str = "",
                 port: Optional[int] = None, path: Optional[str] = None,
                 fragment: Optional[str] = None):
        self._query = query
        self._scheme = scheme
        self._host = host
        self._port = port
        self._path = path
        self._fragment = fragment

    @classmethod
    def build(cls) -> 'UriBuilder':
        """Create an empty builder"""
        return cls(query=ParameterBag())

    @classmethod
    def from_string(cls, uri: str) -> 'UriBuilder':
        """Create a builder from a URI string

        Format: `scheme://host[:port][/path][?query][#fragment]`
        Scheme and host are required; port, path, query and fragment are
        only set when present in the input
        User info (`user:pass@`) is dropped
        The fragment is taken from the original text, after the first `#`
        """
        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError as e:
            logger.debug("Rejected URI %r: %s", uri, e)
            raise InvalidUriError(uri, InvalidUriReason.UNPARSEABLE, str(e)) from e

        if not parts.scheme:
            logger.debug("Rejected URI %r: no scheme", uri)
            raise InvalidUriError(uri, InvalidUriReason.MISSING_SCHEME)

        host = cls._host_from_netloc(parts.netloc)
        if not host:
            logger.debug("Rejected URI %r: no host", uri)
            raise InvalidUriError(uri, InvalidUriReason.MISSING_HOST)

        builder = cls.build().set_scheme(cls._scheme_from_text(uri, parts.scheme)).set_host(host)

        if port is not None:
            builder.set_port(port)

        if parts.path:
            builder.set_path(parts.path)

        if parts.query:
            builder.set_query(parts.query)

        if '#' in uri:
            builder.set_fragment(uri.split('#', 1)[1])

        logger.debug("Parsed URI %r: scheme=%r host=%r port=%r path=%r query=%r fragment=%r",
                     uri, builder._scheme, builder._host, builder._port,
                     builder._path, builder._query.all(), builder._fragment)
        return builder

    @staticmethod
    def _scheme_from_text(uri: str, parsed_scheme: str) -> str:
        """Recover the scheme as written, since urlsplit lowercases it"""
        raw = uri.partition(':')[0].strip()
        return raw if raw.lower() == parsed_scheme else parsed_scheme

    @staticmethod
    def _host_from_netloc(netloc: str) -> str:
        """Strip user info and port from an authority, preserving host case"""
        host_port = netloc.rpartition('@')[2]
        host, sep, _ = host_port.rpartition(':')
        return host if sep else host_port

    def set_scheme(self, scheme: str) -> 'UriBuilder':
        """Set the scheme, stored as-is"""
        self._scheme = scheme
        return self

    def scheme(self) -> str:
        """Get the scheme of this URI"""
        return self._scheme

    def set_host(self, host: str) -> 'UriBuilder':
        """Set the host, stored as-is"""
        self._host = host
        return self

    def host(self) -> str:
        """Get the host of this URI"""
        return self._host

    def set_port(self, port: Optional[int] = None) -> 'UriBuilder':
        """Set the port

        Raises error if port is None or not an int (bool included); the
        range is not checked
        """
        if port is None:
            raise InvalidArgumentError("Cannot set port to a null value.")
        if isinstance(port, bool) or not isinstance(port, int):
            raise InvalidArgumentError(f"Cannot set port to: {type(port).__name__}")
        self._port = port
        return self

    def port(self) -> Optional[int]:
        """Get the port of this URI, or None if unset"""
        return self._port

    def set_path(self, path: Optional[str] = None) -> 'UriBuilder':
        """Set the path, adding a leading `/` if it is missing

        Passing None leaves the builder unchanged
        """
        if path is None:
            return self
        self._path = path if path.startswith('/') else f"/{path}"
        return self

    def append_path(self, path: str) -> 'UriBuilder':
        """Append to the current path with exactly one `/` at the join

        A missing current path counts as empty, so the result always starts
        with `/`
        """
        if not path:
            return self
        current = self._path or ""
        if current.endswith('/') and path.startswith('/'):
            path = path[1:]
        elif not current.endswith('/') and not path.startswith('/'):
            path = f"/{path}"
        self._path = current + path
        return self

    def path(self) -> Optional[str]:
        """Get the path of this URI, or None if unset"""
        return self._path

    def set_query(self, query: Optional[str] = None) -> 'UriBuilder':
        """Replace every query parameter with those parsed from a raw query string

        Raises error if query is None
        """
        if query is None:
            raise InvalidArgumentError("Cannot set query to a null value.")
        self._query = ParameterBag.from_string(query)
        return self

    def query(self) -> ParameterBag:
        """Get the live parameter bag; changes to it change this builder"""
        return self._query

    def set_query_param(self, key: str, value: Any,
                        convert_bool_to_string: bool = False) -> 'UriBuilder':
        """Add or update a single query parameter

        Accepted value types: str, int, float, bool, list, tuple and mappings
        Anything else (None included) raises an error
        With convert_bool_to_string, booleans are stored as "true" / "false"
        """
        if not isinstance(value, QUERY_VALUE_TYPES):
            raise InvalidArgumentError(f"Cannot set Query Parameter to: {type(value).__name__}")

        if convert_bool_to_string and isinstance(value, bool):
            value = "true" if value else "false"

        self._query.set(key, value)
        return self

    def query_params(self) -> Dict[str, Any]:
        """Get a snapshot of the query parameters in insertion order"""
        return self._query.all()

    def set_fragment(self, fragment: str) -> 'UriBuilder':
        """Set the fragment, adding a leading `#` if it is missing

        An empty string leaves the builder unchanged
        """
        if fragment == "":
            return self
        self._fragment = fragment if fragment.startswith('#') else f"#{fragment}"
        return self

    def fragment(self) -> Optional[str]:
        """Get the fragment of this URI (with its `#`), or None if unset"""
        return self._fragment

    def query_to_string(self, encode_query: bool = False) -> str:
        """Serialize just the query parameters (without the leading `?`)

        With encode_query the joined string is URL-encoded as a whole, so
        the `&` and `=` separators are encoded too; only letters, digits and
        `-_.` are left as-is, spaces become `+`
        """
        query = "&".join(f"{k}={v}" for k, v in self._query.all().items())
        if encode_query:
            query = quote_plus(query, safe="").replace("~", "%7E")
        return query

    def to_string(self, encode_query: bool = False) -> str:
        """Get the string representation of this URI

        Parts are emitted in order: scheme, host, port, path, query, fragment
        Port, path and fragment are omitted when unset; the query is omitted
        when there are no parameters
        """
        uri = f"{self._scheme}://{self._host}"

        if self._port is not None:
            uri += f":{self._port}"

        if self._path is not None:
            uri += self._path

        if self._query:
            uri += f"?{self.query_to_string(encode_query)}"

        if self._fragment is not None:
            uri += self._fragment

        return uri

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"UriBuilder('{self.to_string()}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UriBuilder):
            return False
        return (self._scheme == other._scheme
                and self._host == other._host
                and self._port == other._port
                and self._path == other._path
                and self._query == other._query
                and self._fragment == other._fragment)

    __hash__ = None  # type: ignore[assignment]
