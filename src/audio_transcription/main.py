"""
Audio Transcriber Service.

Entry point for the audio transcription service.
"""

import sys

from ddtrace import patch_all

patch_all()

from audio_transcription.exceptions import ConfigurationError  # noqa: E402
from audio_transcription.logging import setup_logging  # noqa: E402

logger = setup_logging()


def main():
    """Builds the dependency graph and starts the worker."""
    try:
        from audio_transcription.dependencies import get_worker
    except ConfigurationError as e:
        logger.error("Startup aborted", extra={"problems": e.problems})
        sys.exit(1)

    worker = get_worker()
    worker.start()


if __name__ == "__main__":
    main()
