"""Entry point for the transcription worker."""

import logging

from ddtrace import patch_all

from lecture_transcriber.dependencies import get_worker
from lecture_transcriber.logging import setup_logging

logger = logging.getLogger(__name__)


def main():
    """Starts the transcription worker."""
    patch_all()
    setup_logging("lecture-transcriber-worker")
    logger.info("Starting lecture transcription worker")
    worker = get_worker()
    try:
        worker.start()
    except KeyboardInterrupt:
        logger.info("Interrupted, draining running jobs")
    finally:
        worker.shutdown()


if __name__ == "__main__":
    main()
