"""GenAI Gateway — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, and the error-to-response boundary.

Modules
-------
main
    FastAPI application factory, route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response bodies.
errors
    Mapping from gateway exceptions to HTTP status codes and JSON bodies.
"""
