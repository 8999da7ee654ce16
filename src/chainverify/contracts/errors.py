"""Exceptions raised by chain verification.

Every exception here is a finding about the data (or about how the caller
described it), never a transient fault. Nothing in chainverify retries.
"""


class ChainVerificationError(Exception):
    """Base class for all chain verification failures."""

    pass


class InvalidChainHeadError(ChainVerificationError):
    """Raised when the chain head key is missing.

    An empty chain still has a head record whose predecessor is the
    terminator, so a missing head is a precondition violation rather than
    "nothing to walk".
    """

    def __init__(self, message: str = "Chain head key must not be None") -> None:
        super().__init__(message)


class ChainCycleDetectedError(ChainVerificationError):
    """Raised when predecessor pointers loop back to an already visited key.

    Attributes:
        key: The key that was reached a second time
        visited: Number of distinct keys walked before the cycle closed
    """

    def __init__(self, key: bytes, visited: int) -> None:
        self.key = key
        self.visited = visited
        super().__init__(f"Predecessor cycle detected at key {key!r} after {visited} records")


class BrokenChainError(ChainVerificationError):
    """Raised when a stored hash does not match its recomputation.

    This is the integrity violation the whole package exists to detect.
    It is always surfaced to the caller.

    Attributes:
        key: Key of the record whose slot failed
        expected: The hash stored with the record
        actual: The hash the verifier computed for that slot
    """

    def __init__(self, key: bytes, expected: str, actual: str) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(f"Hash chain broken at key {key!r}: stored '{expected}', computed '{actual}'")


class DuplicateKeyError(ChainVerificationError):
    """Raised when a table yields the same key twice and duplicates are rejected."""

    def __init__(self, key: bytes) -> None:
        self.key = key
        super().__init__(f"Duplicate chain key {key!r}")


class TableNotFoundError(ChainVerificationError):
    """Raised when a schema provider does not know the requested table."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table not found: {table}")


class SchemaError(ChainVerificationError):
    """Raised when a table's schema cannot carry a hash chain.

    For example, a table without a single-column primary key.
    """

    pass
