"""Builds the configured speech-to-text adapter."""

import logging

import assemblyai as aai
from openai import OpenAI

from lecture_transcriber.config import ProviderConfig
from lecture_transcriber.exceptions import ProviderConfigurationError
from lecture_transcriber.interfaces import TranscriptionService

from .assemblyai_transcriber import AssemblyAITranscriber
from .local_whisper_transcriber import LocalWhisperTranscriber
from .openai_transcriber import OpenAIWhisperTranscriber

logger = logging.getLogger(__name__)


def build_transcription_service(
    config: ProviderConfig, timeout_seconds: float | None = None
) -> TranscriptionService:
    """
    Returns the adapter named by ``config.name``.

    Raises:
        ProviderConfigurationError: For an unknown provider or a missing API key.
    """
    if config.name == "openai":
        if not config.openai_api_key:
            raise ProviderConfigurationError("openai", "OPENAI_API_KEY is not set")
        client = OpenAI(api_key=config.openai_api_key, max_retries=0)
        service = OpenAIWhisperTranscriber(client, config.openai_model)

    elif config.name == "assemblyai":
        if not config.assemblyai_api_key:
            raise ProviderConfigurationError(
                "assemblyai", "ASSEMBLYAI_API_KEY is not set"
            )
        aai.settings.api_key = config.assemblyai_api_key
        if timeout_seconds is not None:
            aai.settings.http_timeout = timeout_seconds
        service = AssemblyAITranscriber(aai.Transcriber())

    elif config.name == "whisper":
        service = LocalWhisperTranscriber(config.whisper_endpoint)

    else:
        raise ProviderConfigurationError(config.name, "unknown provider")

    logger.info("Transcription provider ready", extra={"provider": service.name})
    return service
