"""
Furnace Monitor server entry point.

Usage:
    python -m furnace_monitor.run --host 0.0.0.0 --port 5000
"""

import argparse
import logging
import os

from .app import create_app

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Furnace monitoring backend")
    parser.add_argument("--host", default=os.environ.get("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", 5000)))
    parser.add_argument("--env", default=None, help="development | production | testing")
    args = parser.parse_args()

    app = create_app(args.env)
    socketio = app.extensions["socketio"]

    logger.info(f"Serving on {args.host}:{args.port}")
    try:
        # The reloader would build a second app with its own simulation loop
        socketio.run(
            app, host=args.host, port=args.port, use_reloader=False, allow_unsafe_werkzeug=True
        )
    finally:
        app.extensions["furnace_monitor"].shutdown()


if __name__ == "__main__":
    main()
