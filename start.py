"""Server startup - builds the app from the environment and runs it under uvicorn."""
import logging
import sys
from pathlib import Path

# Add src directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

from api.server import create_app
from utils.config import load_config
from utils.logging import setup_logging

logger = logging.getLogger("newsdesk.start")


def main() -> None:
    config = load_config()
    setup_logging(log_level=config.log_level, json_output=config.log_json)

    app = create_app(config)
    logger.info(f"Starting on port {config.port}")
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
