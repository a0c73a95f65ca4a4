#!/usr/bin/env python3
"""
Container startup script.
Runs migrations, then starts the email service.
"""

import os
import subprocess


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return success status."""
    print(f"\n=== {description} ===")
    try:
        subprocess.run(cmd, check=True)
        return True
    except subprocess.CalledProcessError as e:
        print(f"Warning: {description} failed with code {e.returncode}")
        return False


def main():
    print("\n" + "=" * 50)
    print("Email Service Startup Script")
    print("=" * 50)

    run_command(["alembic", "upgrade", "head"], "Running database migrations")

    port = os.environ.get("APP_PORT", "8080")
    print(f"\n=== Starting uvicorn on port {port} ===\n")

    os.execvp("uvicorn", [
        "uvicorn",
        "notifier.main:app",
        "--host", "0.0.0.0",
        "--port", port
    ])


if __name__ == "__main__":
    main()
