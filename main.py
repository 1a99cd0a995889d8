import sys
import asyncio

from loguru import logger
from rich import print
from rich.panel import Panel

from koshien_digest.config.settings import (
    AppSettings,
    ConfigurationError,
    describe,
    load_settings,
)
from koshien_digest.logging.setup import setup_logging
from koshien_digest.models.enums import RunOutcome
from koshien_digest.notifications.slack_client import DispatchError
from koshien_digest.pipeline.orchestrator import run_digest


async def main(settings: AppSettings) -> RunOutcome:
    """Main entry point for the application."""
    logger.info("Starting koshien digest")
    logger.debug(describe(settings))

    report = await run_digest(settings)

    if report.outcome is RunOutcome.DRY_RUN and report.text:
        print(Panel(report.text, title="Digest (dry run)", expand=False))

    logger.info(f"Run finished: {report.outcome.value}")
    return report.outcome


def run() -> None:
    # Settings are validated before any network call
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(settings)

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(1)
    except DispatchError as e:
        logger.error(f"Failed to post the digest: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unhandled error while building the digest: {e}")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    run()
