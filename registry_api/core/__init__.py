"""
Core application utilities for settings, logging, tokens and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging with correlation id and caller context
- Dependency helpers (caller identity from bearer token, registry access)
"""
