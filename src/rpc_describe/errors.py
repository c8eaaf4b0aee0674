"""Exception types raised while building an API description."""


class DescribeError(Exception):
    """Base class for all rpc-describe errors."""


class RegistrationError(DescribeError):
    """A registered method has a signature that cannot be described.

    Fatal to the whole build: a partially described API is never returned.
    """

    def __init__(self, method: str, position: str, reason: str):
        super().__init__(f"cannot describe method {method!r} at {position}: {reason}")
        self.method = method
        self.position = position
        self.reason = reason


class DocumentationLookupError(DescribeError):
    """Documentation for a declaring identity could not be found."""


class SchemaEncodingError(DescribeError):
    """A schema node could not be canonicalized for deduplication."""


class LoadError(DescribeError):
    """An input file (registry snapshot, documentation) could not be read."""
