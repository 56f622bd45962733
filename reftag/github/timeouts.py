from __future__ import annotations

# Single REST or GraphQL round trip. A run has no overall timeout of its own;
# the runner's job timeout bounds it.
HTTP_TIMEOUT_SECONDS = 30.0

# GraphQL refs page size (the API maximum).
REFS_PAGE_SIZE = 100
