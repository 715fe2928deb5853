import asyncio
import json

import httpx
import pytest

from resume_optimizer import config
from resume_optimizer.backends import GitHubModelsBackend, OllamaBackend, get_backend, parse_json_body
from resume_optimizer.config import Settings
from resume_optimizer.errors import BackendTimedOut, BackendUnreachable, ConfigurationError
from resume_optimizer.prompts import SINGLE_STRING, STRUCTURED, build

RESUME = "Jane Doe\n- Shipped things"


def test_ollama_request_shape(fake_http):
    fake_http.outcome = fake_http.Response(200, json.dumps({"response": "## Resume"}))
    backend = OllamaBackend()
    payload = build(RESUME, "", "", backend.prompt_mode)

    resp = asyncio.run(backend.invoke(payload, Settings(timeout_seconds=5)))

    call = fake_http.calls[0]
    assert call["url"] == config.OLLAMA_GENERATE_ENDPOINT
    assert call["timeout"] == 5
    assert "Authorization" not in call["headers"]
    assert call["json"] == {
        "model": "llama3",
        "prompt": payload.prompt,
        "stream": False,
        "options": {"temperature": 0.3, "num_predict": 2000},
    }
    assert resp.ok and resp.data == {"response": "## Resume"}


def test_github_request_shape(fake_http):
    fake_http.outcome = fake_http.Response(200, "{}")
    backend = GitHubModelsBackend()
    settings = Settings(github_model_id="openai/gpt-4o-mini", github_token="tok")
    payload = build(RESUME, "SRE", "Casual", backend.prompt_mode)

    asyncio.run(backend.invoke(payload, settings))

    call = fake_http.calls[0]
    assert call["url"] == config.GITHUB_MODELS_ENDPOINT
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["headers"]["X-GitHub-Api-Version"] == "2022-11-28"
    body = call["json"]
    assert body["model"] == "openai/gpt-4o-mini"
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["max_tokens"] == 2000
    assert body["temperature"] == 0.3
    assert body["stream"] is False


def test_invoke_keeps_non_json_body_as_text(fake_http):
    fake_http.outcome = fake_http.Response(502, "<html>Bad Gateway</html>")
    resp = asyncio.run(GitHubModelsBackend().invoke(build(RESUME, "", "", STRUCTURED), Settings(github_token="t")))
    assert not resp.ok
    assert resp.data is None
    assert resp.text == "<html>Bad Gateway</html>"


@pytest.mark.parametrize("exc,signal", [
    (httpx.ConnectError("Connection refused"), BackendUnreachable),
    (httpx.ConnectTimeout("timed out"), BackendTimedOut),
    (httpx.ReadTimeout("timed out"), BackendTimedOut),
])
def test_invoke_translates_transport_failures(fake_http, exc, signal):
    fake_http.outcome = exc
    with pytest.raises(signal):
        asyncio.run(OllamaBackend().invoke(build(RESUME, "", "", SINGLE_STRING), Settings()))


def test_extract_content_variants():
    ollama, github = OllamaBackend(), GitHubModelsBackend()
    assert ollama.extract_content({"response": "## A"}) == "## A"
    assert ollama.extract_content({"done": True}) == ""
    assert ollama.extract_content(None) == ""
    assert github.extract_content({"choices": [{"message": {"content": "## B"}}]}) == "## B"
    assert github.extract_content({"choices": [{"text": "## C"}]}) == "## C"
    assert github.extract_content({"choices": []}) == ""
    assert github.extract_content({"id": "x"}) == ""
    assert github.extract_content("not a dict") == ""


def test_unknown_model_detection():
    github = GitHubModelsBackend()
    assert github.is_unknown_model({"error": {"code": "unknown_model", "message": "Unknown model: x"}}, "")
    assert github.is_unknown_model({"code": "unknown_model"}, "")
    assert github.is_unknown_model(None, "unknown_model: nope")
    assert not github.is_unknown_model({"error": {"code": "unauthorized"}}, "unknown_model")

    ollama = OllamaBackend()
    assert ollama.is_unknown_model({"error": 'model "llama3" not found, try pulling it first'}, "")
    assert not ollama.is_unknown_model({"error": "out of memory"}, "")


def test_github_requires_token():
    with pytest.raises(ConfigurationError):
        GitHubModelsBackend().check_settings(Settings(github_token=None))


def test_get_backend():
    assert isinstance(get_backend("ollama"), OllamaBackend)
    assert isinstance(get_backend("github"), GitHubModelsBackend)
    with pytest.raises(ConfigurationError):
        get_backend("nope")


def test_parse_json_body():
    assert parse_json_body('{"a": 1}') == {"a": 1}
    assert parse_json_body("") is None
    assert parse_json_body("oops") is None


def test_unknown_model_stops_at_first_present_code():
    github = GitHubModelsBackend()
    assert not github.is_unknown_model({"error": {"code": 404, "message": "unknown_model x"}}, "")
    assert github.is_unknown_model({"error": {"message": "unknown_model x"}}, "")
    assert github.is_unknown_model({"error": "unknown_model"}, '{"error": "unknown_model"}')
