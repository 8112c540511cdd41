"""FastAPI application for the arbitrage scanner."""

import os

import uvicorn
from fastapi import FastAPI

from flashroute import __version__
from flashroute.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("FLASHROUTE_HOST", "0.0.0.0")
PORT = int(os.environ.get("FLASHROUTE_PORT", "8000"))
DEBUG = os.environ.get("FLASHROUTE_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="flashroute",
    description="Cross-pool arbitrage scanner and flash-loan route builder for Osmosis",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the scanner API server.

    Configuration via environment variables:
    - FLASHROUTE_HOST: Host to bind to (default: 0.0.0.0)
    - FLASHROUTE_PORT: Port to bind to (default: 8000)
    - FLASHROUTE_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "flashroute.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
