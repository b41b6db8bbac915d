"""Shared field types for request schemas."""

from typing import Annotated

from pydantic import StringConstraints

# Required text input: surrounding whitespace is dropped and the rest must be non-empty
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Optional text input: whitespace trimmed, empty allowed
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
