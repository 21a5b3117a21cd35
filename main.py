"""
Mailchimp Dashboard - Main Entry Point
Serves the admin panel with uvicorn
"""
import logging
import sys

import uvicorn

import config

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    errors = config.validate_config()
    if errors:
        logger.error(f"Config Validation Error: {errors}")
        sys.exit(1)

    logger.info(f"🚀 Starting panel on {config.HOST}:{config.PORT}")
    uvicorn.run(
        "admin_panel.app:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Panel stopped")
        raise
