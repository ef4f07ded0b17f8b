"""HTTP API for canvas conversion (FastAPI)."""
