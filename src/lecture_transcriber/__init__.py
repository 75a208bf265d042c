from lecture_transcriber.logging import setup_logging

__all__ = ["setup_logging"]
