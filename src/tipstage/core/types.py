"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/", "/tips/36")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Numeric tip identifier, positive and unique within a collection
TipId = NewType("TipId", int)
