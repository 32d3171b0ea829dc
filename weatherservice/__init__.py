"""Weather forecast service: seeded store, HTTP API, and client."""

__version__ = "0.1.0"
