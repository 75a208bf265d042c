"""Abstract interface for reporting segment results to the owning service."""

from abc import ABC, abstractmethod

from lecture_transcriber.domain.models import TranscriptionResultPayload


class ResultReporter(ABC):
    """Delivers a finished segment's paragraphs to whoever owns the session."""

    @abstractmethod
    def report(self, payload: TranscriptionResultPayload) -> None:
        """
        Delivers the result. An empty paragraph list must still be delivered.

        Raises:
            CallbackDeliveryError: If the owning service could not be reached
                or refused the result.
        """
