import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep a developer's .env out of the tests.
    monkeypatch.setattr("request_client.settings.load_dotenv", lambda: False)
    monkeypatch.setattr("request_client.resolvers.load_dotenv", lambda: False)
    for name in (
        "REQUEST_CLIENT_CORRELATION_HEADER",
        "REQUEST_CLIENT_PROTOCOL",
        "REQUEST_CLIENT_TIMEOUT_MS",
        "REQUEST_CLIENT_RETRY_MAX",
        "REQUEST_CLIENT_MIN_BACKOFF_MS",
        "REQUEST_CLIENT_MAX_BACKOFF_MS",
        "REQUEST_CLIENT_VERBOSE",
        "CONSUL_HTTP_ADDR",
        "ZOOKEEPER_HOSTS",
        "ZOOKEEPER_BASE_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
