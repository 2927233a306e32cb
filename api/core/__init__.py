"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
settings, error types). Table access lives in `records/`, credentials and
tokens in `auth/`.
"""
