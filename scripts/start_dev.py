#!/usr/bin/env python3
"""
Development startup script.

Checks dependencies and configuration, then starts the storefront BFF
in development mode.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path

from dotenv import dotenv_values

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

REQUIRED_VARS = [
    "CT_CLIENT_ID",
    "CT_CLIENT_SECRET",
    "CT_AUTH_URL",
    "CT_API_URL",
    "CT_PROJECT_KEY",
]


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import pydantic_settings
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Check if .env file exists and carries the commerce credentials."""
    env_file = PROJECT_ROOT / ".env"
    env_example = PROJECT_ROOT / ".env.example"

    if not env_file.exists():
        if not env_example.exists():
            print("✗ No configuration file found")
            return False
        print("! Configuration file not found, copying from example...")
        shutil.copy(env_example, env_file)
        print("✓ Created .env from example")
        print("  Please edit .env with your commerce API client credentials")

    values = {**dotenv_values(env_file), **os.environ}
    missing = [var for var in REQUIRED_VARS if not values.get(var)]
    if missing:
        print(f"✗ Missing configuration: {', '.join(missing)}")
        return False

    print("✓ Configuration file found")
    return True


def start_service(port: int = 5000):
    """Start the BFF in development mode."""
    print(f"\n🛒 Starting Storefront BFF on http://localhost:{port} ...")
    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "storefront.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", str(port),
        ],
        cwd=PROJECT_ROOT,
    )

    print("\n" + "=" * 60)
    print("📍 Storefront API: http://localhost:%d/api/storefront" % port)
    print("📍 API docs:       http://localhost:%d/docs" % port)
    print("\nPress Ctrl+C to stop")
    print("=" * 60)

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Stopped.")


def main():
    print("=" * 60)
    print("Storefront BFF - Development Server")
    print("=" * 60)

    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    start_service(int(os.getenv("PORT", "5000")))


if __name__ == "__main__":
    main()
