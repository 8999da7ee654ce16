"""Status codes and modes used across subsystem boundaries."""

from enum import StrEnum


class ChainState(StrEnum):
    """Lifecycle of a single hash verification pass.

    START -> VERIFYING -> VERIFIED | BROKEN. VERIFIED and BROKEN are terminal.
    """

    START = "start"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    BROKEN = "broken"


class HashLinkage(StrEnum):
    """Which record's content a stored hash commits to.

    PREDECESSOR: record N stores the hash recomputed for record N-1; the
        oldest record stores the empty string and the head's own hash is
        held outside the table as the trusted predecessor hash.
    SELF: record N stores the hash of its own content chained onto the
        previous stored hash.
    """

    PREDECESSOR = "predecessor"
    SELF = "self"
