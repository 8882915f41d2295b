"""Liveness probe."""

from litestar import get


@get("/api/health", sync_to_thread=False)
def health() -> dict:
    """Report that the API process is up. No authentication."""
    return {"status": "OK", "message": "Feedback Collector API is running"}
