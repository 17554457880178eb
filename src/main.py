"""
Herald - Main application entry point.

Emergency alert backend that fans alerts out over email, SMS and push and
tracks delivery and acknowledgments.
"""

import json
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from herald.config.logging import get_logger
from herald.config.settings import get_settings
from herald.services.notification import ChannelSettings, Dispatcher
from herald.utils.config import initialize_application, missing_environment


def print_channel_status() -> None:
    """Show which channels will use a real provider and which are simulated."""
    dispatcher = Dispatcher.from_channel_settings(ChannelSettings.from_settings(get_settings()))
    print(json.dumps(dispatcher.channel_status(), indent=2))


def main() -> None:
    """Main application entry point."""
    # Initialize application (logging, config, database)
    settings = initialize_application()

    logger = get_logger(__name__)
    logger.info("Starting Herald application")

    missing = missing_environment()
    if missing:
        logger.error("Environment validation failed", missing=missing)
        print(
            "Please set the required environment variables before running the application."
        )
        print(f"Missing variables: {', '.join(missing)}")
        sys.exit(1)

    logger.info("Environment validation passed")

    if "-channels" in sys.argv:
        print_channel_status()
        return

    logger.info(
        "Starting API server",
        host=settings.endpoint_host,
        port=settings.endpoint_port,
    )

    try:
        uvicorn.run(
            "herald.webapi.app:app",
            host=settings.endpoint_host,
            port=settings.endpoint_port,
            reload=settings.api_reload,
            log_level=settings.api_log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")


if __name__ == "__main__":
    main()
