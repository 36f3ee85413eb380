"""Reqline DSL parsing and validation.

The reqline layer converts a single-line statement such as
`HTTP GET | URL https://example.com | QUERY {"id": 1}` into a strict `RequestDescriptor`, which is
then executed against the upstream by `src.upstream`.
"""
