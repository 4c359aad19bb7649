"""
Server startup script.

Usage:
    python -m copytrade_analytics
    python -m copytrade_analytics --reload
    python -m copytrade_analytics --port 8080

On Windows the selector event loop policy is set before uvicorn creates its
loop; psycopg's async driver does not run on the proactor loop.
"""

import argparse
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import uvicorn

from copytrade_analytics.config import settings


def main() -> None:
    """Start the FastAPI application."""
    parser = argparse.ArgumentParser(description="Run the copy-trading analytics API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.backend_port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    uvicorn.run(
        "copytrade_analytics.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        loop="asyncio",
    )


if __name__ == "__main__":
    main()
