"""HTTP primitives — immutable request, headers, query, and response."""
