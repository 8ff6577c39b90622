import httpx
import pytest

import main
from request_client import HostPortRequestClient
from request_client.transport import HttpxTransport


def test_parse_pairs() -> None:
    assert main._parse_pairs(["Accept: application/json", "X-A:1"], ":", "--header") == {
        "Accept": "application/json",
        "X-A": "1",
    }
    assert main._parse_pairs(None, "=", "--query") == {}
    with pytest.raises(ValueError):
        main._parse_pairs(["novalue"], "=", "--query")


def test_main_performs_request(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="pong")

    def client_factory(*args, **kwargs) -> HostPortRequestClient:
        return HostPortRequestClient(*args, transport=HttpxTransport(httpx.MockTransport(handler)), **kwargs)

    monkeypatch.setattr(main, "HostPortRequestClient", client_factory)
    exit_code = main.main(
        ["post", "svc", "8080", "ping", "--service-path", "api", "--query", "a=1", "--body", '{"x": 1}', "--correlation-id", "cid"]
    )

    assert exit_code == 0
    assert "pong" in capsys.readouterr().out
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "http://svc:8080/api/ping?a=1"
    assert request.headers["X-CorrelationID"] == "cid"


def test_main_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    def client_factory(*args, **kwargs) -> HostPortRequestClient:
        return HostPortRequestClient(*args, transport=HttpxTransport(httpx.MockTransport(handler)), **kwargs)

    monkeypatch.setattr(main, "HostPortRequestClient", client_factory)
    assert main.main(["get", "svc", "8080", "missing"]) == 1


def test_main_rejects_invalid_json_body(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main.main(["post", "svc", "8080", "ping", "--body", "{not json"])
    assert exc.value.code == 2
    assert "--body must be valid JSON" in capsys.readouterr().err
