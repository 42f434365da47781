"""Logosmith Gateway - FastAPI REST API layer.

Modules
-------
main
    Application factory, route handlers and the ``main()`` CLI entry point.
models
    Pydantic models for request validation.
prompt_builder
    Logo prompt template compilation.
guards
    CORS, rate limiting, body-size cap and security headers.
"""
