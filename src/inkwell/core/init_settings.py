"""
Initialize settings based on command-line arguments and environment.

Usage:
    # Import anywhere to get mode-aware settings
    from inkwell.core.init_settings import settings

    # Or run directly
    python -m inkwell.main --mode prod --host 0.0.0.0
"""
import os
import sys
import argparse
from inkwell.core.config import get_settings

DEFAULT_PORT = int(os.getenv("PORT", "8000"))

parser = argparse.ArgumentParser(description="Inkwell GraphQL API Server")
parser.add_argument(
    "--mode",
    choices=["dev", "prod"],
    default="dev",
    help="Running mode: dev (SQLite) or prod (PostgreSQL)"
)
parser.add_argument(
    "--host",
    type=str,
    default="127.0.0.1",
    help="Host to bind to"
)
parser.add_argument(
    "--port",
    type=int,
    default=DEFAULT_PORT,
    help="Port to bind to (default: $PORT or 8000)"
)

# Check if running under pytest or uvicorn reload
is_testing = "pytest" in sys.argv[0]
is_uvicorn = "uvicorn" in sys.argv[0]

if is_testing or is_uvicorn:
    # Mode comes from the environment when running tests or via uvicorn
    mode = os.getenv("APP_MODE", "dev")
    args = argparse.Namespace(mode=mode, host="127.0.0.1", port=DEFAULT_PORT)
else:
    # Unknown arguments belong to the calling entrypoint (e.g. the worker)
    args, _ = parser.parse_known_args()

settings = get_settings(args.mode)

__all__ = ["settings", "args"]
