#!/usr/bin/env python
"""
Production Server Entry Point

Starts the BI Dashboard API.
Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py

    Or with Gunicorn:
    gunicorn bi_dashboard.main:app -c gunicorn.conf.py
"""

import argparse
import os
import subprocess


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "bi_dashboard.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        reload_dirs=["bi_dashboard"],
        log_level="debug",
        access_log=True,
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    uvicorn.run(
        "bi_dashboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        workers=int(os.getenv("WORKERS", 4)),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
        date_header=True,
    )


def run_gunicorn(port: int):
    """Run with Gunicorn (recommended for production)."""
    env = dict(os.environ, BIND=f"0.0.0.0:{port}")
    subprocess.run(
        ["gunicorn", "bi_dashboard.main:app", "-c", "gunicorn.conf.py"],
        env=env,
        check=False,
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="BI Dashboard API Server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run in development mode with auto-reload"
    )
    parser.add_argument(
        "--gunicorn",
        action="store_true",
        help="Run with Gunicorn (production)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", 5000)),
        help="Port to run on (default: $PORT or 5000)"
    )

    args = parser.parse_args()
    os.environ["PORT"] = str(args.port)

    if args.dev:
        print("Starting development server...")
        run_dev_server(args.port)
    elif args.gunicorn:
        print("Starting production server with Gunicorn...")
        run_gunicorn(args.port)
    else:
        print("Starting production server with Uvicorn...")
        run_prod_server(args.port)
