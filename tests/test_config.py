from lecture_transcriber.config import load_config


def test_defaults(monkeypatch):
    for name in ["API_INTERNAL_URL", "API_URL", "PORT", "STT_PROVIDER", "PARAGRAPH_TIMING", "CHUNK_CUT_WORKERS"]:
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.provider.name == "openai"
    assert config.chunking.max_chunk_bytes == 24 * 1024 * 1024
    assert config.chunking.cut_workers is None
    assert config.retry.max_attempts == 3
    assert config.worker.concurrency == 5
    assert config.worker.rate_limit_max == 10
    assert config.segmenter.timing == "heuristic"
    assert config.callback.api_base_url == "http://127.0.0.1:4000"
    assert config.rabbitmq.queue_config.max_delivery_count == 3


def test_callback_url_prefers_internal_url(monkeypatch):
    monkeypatch.setenv("API_URL", "http://public")
    monkeypatch.setenv("API_INTERNAL_URL", "http://internal")

    assert load_config().callback.api_base_url == "http://internal"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STT_PROVIDER", "Whisper")
    monkeypatch.setenv("TRANSCRIBE_CONCURRENCY", "2")
    monkeypatch.setenv("PARAGRAPH_TIMING", "provider")
    monkeypatch.setenv("COMPLETION_TRACKER", "redis")
    monkeypatch.setenv("CHUNK_CUT_WORKERS", "4")

    config = load_config()

    assert config.provider.name == "whisper"
    assert config.worker.concurrency == 2
    assert config.segmenter.timing == "provider"
    assert config.tracker.backend == "redis"
    assert config.chunking.cut_workers == 4
