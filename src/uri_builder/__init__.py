"""URI Builder - Fluent construction and parsing of URIs

This package provides a mutable URI builder that assembles a URI from its
parts, parses URI strings back into those parts, and serializes them
losslessly.
"""

from .parameter_bag import ParameterBag
from .uri_builder import (
    UriBuilder,
    UriBuilderError,
    InvalidUriError,
    InvalidUriReason,
    InvalidArgumentError,
)

__version__ = "0.1.0"

__all__ = [
    "UriBuilder",
    "ParameterBag",
    "UriBuilderError",
    "InvalidUriError",
    "InvalidUriReason",
    "InvalidArgumentError",
]
