"""
Shared utilities for talking to external services.

- http.py - ``requests`` session factory with retry/backoff and a default timeout
"""
