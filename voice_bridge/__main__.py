"""Run the bridge under uvicorn."""

from __future__ import annotations

import os
import argparse

import uvicorn

from voice_bridge.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Speech-to-speech session bridge")
    p.add_argument("--host", default=os.getenv(ENV_HOST) or DEFAULT_HOST, help="Bind address")
    p.add_argument("--port", type=int, default=int(os.getenv(ENV_PORT) or DEFAULT_PORT), help="Bind port")
    return p.parse_args()


def main() -> None:
    args = parse_args()
    uvicorn.run("voice_bridge.server:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
