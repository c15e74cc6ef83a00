#!/usr/bin/env python3
"""
Pointing Client Application

Terminal client for the Scrum pointing tool, built on Textual.

Environment:
    POINTING_SERVER: Server address pre-filled in the join form
        (default localhost:10000)
    POINTING_NICKNAME, POINTING_ROOM: Optional join form defaults
    POINTING_CLIENT_LOG: Log file (default pointing_client.log)
    LOG_LEVEL: Logging level (default WARNING)
"""

import logging
import os
import sys
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "localhost:10000"


def client_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Read join form defaults from the environment.

    Returns:
        dict with server_address, nickname and room (empty when unset)
    """
    environ = os.environ if environ is None else environ
    return {
        "server_address": environ.get("POINTING_SERVER", "").strip() or DEFAULT_SERVER,
        "nickname": environ.get("POINTING_NICKNAME", "").strip(),
        "room": environ.get("POINTING_ROOM", "").strip(),
    }


def main():
    """Main entry point for the pointing client."""
    # The UI owns the terminal, so logs go to a file
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(
                os.environ.get("POINTING_CLIENT_LOG", "pointing_client.log"), mode="a"
            )
        ],
    )
    settings = client_settings()
    logger.info(f"Starting pointing client for {settings['server_address']}")

    try:
        from .ui import PointingApp

        PointingApp(**settings).run()
    except ImportError as e:
        print(f"Error: Could not import UI components: {e}")
        print("Make sure textual is installed: pip install textual")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)


if __name__ == "__main__":
    main()
