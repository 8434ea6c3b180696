import logging
import os
import sys

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Allow running from a checkout without installing the package
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, "src")
sys.path.insert(0, src_path)


def _report_environment() -> None:
    """Log which settings are present without exposing secrets."""
    for name in ("AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY", "MONGO_URI"):
        logger.info("  %s: %s", name, "set" if os.environ.get(name) else "not set")
    for name in ("MONGO_BACKEND", "AZURE_OPENAI_DEPLOYMENT_NAME", "LOG_LEVEL", "APP_ENV"):
        logger.info("  %s: %s", name, os.environ.get(name, "not set"))


if __name__ == "__main__":
    from healthvoice.core.config import get_settings
    from healthvoice.core.exceptions import ConfigurationError

    _report_environment()
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("Configuration validation failed: %s", e.message)
        sys.exit(1)

    port = int(os.environ.get("PORT", settings.port))
    host = os.environ.get("HOST", settings.host)
    logger.info("Starting %s v%s on %s:%s", settings.app_name, settings.app_version, host, port)

    uvicorn.run(
        "healthvoice.app:create_app",
        factory=True,
        host=host,
        port=port,
        workers=1,
        log_level=settings.logging.level.lower(),
        access_log=True,
        timeout_keep_alive=75,
        timeout_graceful_shutdown=30,
    )
