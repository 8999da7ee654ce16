# tests/property/__init__.py
"""Property-based tests for chain reconstruction and verification."""
