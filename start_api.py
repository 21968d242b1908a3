#!/usr/bin/env python3
"""
Start the Event Finder API server.

Usage:
    python start_api.py              # Development mode with auto-reload
    python start_api.py --prod       # Production mode
    python start_api.py --port 8080  # Custom port (default: $PORT or 3000)
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Start Event Finder API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "3000")),
        help="Port to bind to (default: $PORT or 3000)",
    )
    parser.add_argument("--prod", action="store_true", help="Run without auto-reload")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes in --prod mode")
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload in development")
    return parser


def uvicorn_options(args: argparse.Namespace) -> dict:
    """Translate command-line flags into ``uvicorn.run`` keyword arguments."""
    options = {"app": "api.main:app", "host": args.host, "port": args.port}
    if args.prod:
        options.update(workers=args.workers, log_level="info")
    else:
        options.update(log_level="debug")
        if not args.no_reload:
            options.update(reload=True, reload_dirs=["api", "upstream", "static"])
    return options


def main():
    load_dotenv()
    args = build_parser().parse_args()
    mode = "PRODUCTION" if args.prod else "DEVELOPMENT"
    print(f"Starting Event Finder API in {mode} mode on http://{args.host}:{args.port}")
    print(f"   Frontend: http://{args.host}:{args.port}/index.html")
    uvicorn.run(**uvicorn_options(args))


if __name__ == "__main__":
    main()
