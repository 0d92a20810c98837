"""Constrained string types shared by the request schemas."""

from typing import Annotated

from pydantic import StringConstraints

# Surrounding whitespace is dropped before the length checks run, so a
# whitespace-only value fails validation instead of being stored as "".
Identity = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
ContestName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=120)]
