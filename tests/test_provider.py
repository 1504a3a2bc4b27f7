import asyncio
from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors

from casegen.error import AuthenticationError, ProviderError
from casegen.provider import Gemini

from conftest import text_response


def _with_fake_sdk(provider, generate_content):
    provider.gemini = SimpleNamespace(
        aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    )
    return provider


def test_missing_key_raises(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(AuthenticationError):
        Gemini()


def test_generate_passes_model_and_prompt():
    seen = {}

    async def fake_generate_content(model, contents):
        seen.update(model=model, contents=contents)
        return text_response("tests")

    provider = _with_fake_sdk(Gemini(model="gemini-test", api_key="k"), fake_generate_content)
    response = asyncio.run(provider.generate("prompt text"))
    assert response.text == "tests"
    assert seen == {"model": "gemini-test", "contents": "prompt text"}


def test_api_error_keeps_status_code_and_text():
    async def fake_generate_content(model, contents):
        raise errors.APIError(
            429,
            {
                "error": {
                    "code": 429,
                    "message": "Resource has been exhausted (e.g. check quota).",
                    "status": "RESOURCE_EXHAUSTED",
                }
            },
        )

    provider = _with_fake_sdk(Gemini(api_key="k"), fake_generate_content)
    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(provider.generate("p"))
    assert excinfo.value.status_code == 429
    assert "quota" in excinfo.value.message


def test_other_errors_are_chained():
    async def fake_generate_content(model, contents):
        raise httpx.ConnectError("All connection attempts failed")

    provider = _with_fake_sdk(Gemini(api_key="k"), fake_generate_content)
    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(provider.generate("p"))
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert excinfo.value.status_code is None


def test_error_without_text_keeps_message_empty():
    async def fake_generate_content(model, contents):
        raise TimeoutError()

    provider = _with_fake_sdk(Gemini(api_key="k"), fake_generate_content)
    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(provider.generate("p"))
    assert excinfo.value.message == ""
    assert str(excinfo.value) == "[Gemini] Gemini request failed"
