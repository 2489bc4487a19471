#!/usr/bin/env python3
"""Launch the quote API with uvicorn, honouring the PORT environment variable."""

import os
import subprocess
import sys

APP = "quote_engine.main:app"


def _port(default: int = 8000) -> int:
    raw = os.environ.get("PORT", str(default))
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: invalid PORT value '{raw}', using {default}", file=sys.stderr)
        return default


def _export_src() -> None:
    """Expose the src/ package to this process and to the uvicorn child."""
    src_path = os.path.abspath("src")
    if not os.path.isdir(src_path):
        return
    existing = os.environ.get("PYTHONPATH")
    os.environ["PYTHONPATH"] = os.pathsep.join(filter(None, [src_path, existing]))
    sys.path.insert(0, src_path)


def main() -> int:
    _export_src()
    try:
        import quote_engine.main  # noqa: F401
    except ImportError as e:
        print(f"Cannot import {APP}: {e}", file=sys.stderr)
        return 1

    port = _port()
    cmd = [
        sys.executable, "-m", "uvicorn", APP,
        "--host", "0.0.0.0",
        "--port", str(port),
        "--proxy-headers",
        "--forwarded-allow-ips", "*",
    ]
    print(f"Starting quote API on port {port}...", file=sys.stderr)
    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
