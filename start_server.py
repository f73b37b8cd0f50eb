#!/usr/bin/env python3
"""Start script that runs the API under uvicorn on the PORT environment variable."""

import os
import sys

import uvicorn

# Get PORT from environment, default to 8000
port = os.environ.get("PORT", "8000")

try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
    port_int = 8000

# Make the src layout importable when running from a checkout
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if os.path.isdir(src_path) and src_path not in sys.path:
    sys.path.insert(0, src_path)

try:
    from parcel_router.config import settings
    from parcel_router.logging_config import configure_logging
except ImportError as e:
    print(f"Failed to import parcel_router: {e}", file=sys.stderr)
    sys.exit(1)

configure_logging()
print(f"Starting server on port {port_int}...", file=sys.stderr)

try:
    uvicorn.run(
        "parcel_router.main:app",
        host="0.0.0.0",
        port=port_int,
        proxy_headers=True,
        forwarded_allow_ips="*",
        log_level=settings.log_level.lower(),
    )
except KeyboardInterrupt:
    print("Server interrupted by user", file=sys.stderr)
    sys.exit(0)
