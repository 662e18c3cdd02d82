#!/usr/bin/env python3
"""mapshift - drag country shapes across a Web Mercator map.

Starts the Flask server that hosts shape projection sessions.
"""

import logging
import os

from mapshift.config import log_level
from mapshift.server import app

PORT = int(os.environ.get("PORT", 5050))
HOST = os.environ.get("HOST", "127.0.0.1")


if __name__ == "__main__":
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=HOST, port=PORT, debug=False)
