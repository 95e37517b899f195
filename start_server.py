#!/usr/bin/env python3
"""Start the courier routing API, honouring the PORT and LOG_LEVEL environment variables."""

import logging
import os
import sys

import uvicorn

port = os.environ.get("PORT", "8000")
try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
    port_int = 8000

log_level = os.environ.get("LOG_LEVEL", "info").lower()
logging.basicConfig(
    level=log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

if __name__ == "__main__":
    print(f"Starting server on port {port_int}...", file=sys.stderr)
    uvicorn.run(
        "src.courier.main:app",
        host="0.0.0.0",
        port=port_int,
        log_level=log_level,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
