"""Helper functions shared by the chain stages."""

from chainverify.contracts.chain import CellValue


def describe_key(key: CellValue) -> str | None:
    """Render a raw key for log events.

    Keys are opaque bytes; most are UTF-8 text, so show them as text and
    escape anything that is not.
    """
    if key is None:
        return None
    return key.decode("utf-8", errors="backslashreplace")
