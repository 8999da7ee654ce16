"""
chainverify: Tamper-evidence verification for hash-chained tables.

Walks a table's predecessor links from a trusted head back to the chain
terminator, recomputes every record's hash, and reports whether the chain
is unbroken.
"""

__version__ = "0.1.0"
