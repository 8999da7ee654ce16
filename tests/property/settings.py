# tests/property/settings.py
"""Standardized Hypothesis settings profiles for property tests.

Import these instead of using inline @settings(max_examples=...).

Tiers:
- DETERMINISM_SETTINGS: 500 examples - record hash determinism
- STANDARD_SETTINGS: 100 examples - chain walk and verification properties
- QUICK_SETTINGS: 20 examples - simple rejection tests
"""

from hypothesis import settings

# Record hashes MUST be deterministic or no stored chain can ever verify
DETERMINISM_SETTINGS = settings(max_examples=500)

# Standard property tests - good balance of coverage and speed
STANDARD_SETTINGS = settings(max_examples=100)

# Quick validation tests - simple input rejection
QUICK_SETTINGS = settings(max_examples=20)
