"""Delivers segment results to the owning service over HTTP."""

import logging

import requests

from lecture_transcriber.domain.models import TranscriptionResultPayload
from lecture_transcriber.exceptions import CallbackDeliveryError
from lecture_transcriber.interfaces import ResultReporter

logger = logging.getLogger(__name__)


class HttpResultReporter(ResultReporter):
    """POSTs each result to ``{base_url}/sessions/{session_id}/transcription-result``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def report(self, payload: TranscriptionResultPayload) -> None:
        url = f"{self._base_url}/sessions/{payload.session_id}/transcription-result"
        try:
            response = self._session.post(
                url, json=payload.to_wire(), timeout=self._timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.exception(
                "Result callback failed",
                extra={"url": url, "segment_id": payload.segment_id},
            )
            raise CallbackDeliveryError(url, e) from e

        logger.info(
            "Result delivered",
            extra={
                "session_id": payload.session_id,
                "segment_id": payload.segment_id,
                "paragraph_count": len(payload.paragraphs),
            },
        )
