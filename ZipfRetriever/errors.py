"""
Exception types raised by the ZipfRetriever core.

Everything derives from RetrieverError so front ends can catch a single type
and report the failure without losing the in-memory index.
"""


class RetrieverError(Exception):
    """Base class for all errors raised by the search engine core."""


class PreconditionError(RetrieverError, ValueError):
    """An operation was called in a state or with arguments it does not accept."""


class ConfigurationError(RetrieverError, ValueError):
    """Invalid percentile, unknown strategy kind or malformed configuration."""


class IndexIOError(RetrieverError, OSError):
    """Missing corpus directory, empty corpus or missing index file."""


class FormatError(RetrieverError, ValueError):
    """The binary index file is truncated or structurally invalid."""
