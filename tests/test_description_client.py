import logging
from types import SimpleNamespace

import pytest

from cotizaobra.core.strings import STRINGS
from cotizaobra.core.quote import Language
from cotizaobra.services.description_client import (
    DescriptionClient,
    GenerationError,
    build_description_prompt,
)

UNCONFIGURED_ES = STRINGS[Language.ES]["error_unconfigured"]
UNCONFIGURED_EN = STRINGS[Language.EN]["error_unconfigured"]
SERVICE_ES = STRINGS[Language.ES]["error_service"]
SERVICE_EN = STRINGS[Language.EN]["error_service"]


def test_prompt_contains_instruction_language_and_key_points():
    points = "Piso para 2000 pies²\n15 escalones, 2 descansos"
    es = build_description_prompt(points, "es")
    en = build_description_prompt(points, Language.EN)

    assert "professional project description" in es
    assert "Escribe en español formal y profesional." in es
    assert "Write in professional, formal English." in en
    assert f"---\n{points}\n---" in es


@pytest.mark.anyio
async def test_success_returns_text_unmodified(fake_openai):
    text = "  Remodelación completa de escaleras.\n\nIncluye 2 descansos.  "
    client, completions = fake_openai(content=text)
    dc = DescriptionClient(api_key="sk-test", model="gpt-test", client=client)

    result = await dc.generate("15 escalones", "es")

    assert result.ok
    assert result.text == text
    assert len(completions.calls) == 1
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["messages"][-1]["content"] == build_description_prompt("15 escalones", "es")


@pytest.mark.anyio
@pytest.mark.parametrize("language, expected", [("es", UNCONFIGURED_ES), ("en", UNCONFIGURED_EN)])
async def test_unconfigured_makes_no_call(fake_openai, caplog, language, expected):
    client, completions = fake_openai()
    dc = DescriptionClient(api_key="", client=client)

    with caplog.at_level(logging.WARNING):
        result = await dc.generate("baño nuevo", language)

    assert result.text == expected
    assert result.error is GenerationError.UNCONFIGURED
    assert not result.ok
    assert completions.calls == []
    assert "OPENAI_API_KEY" in caplog.text


@pytest.mark.anyio
@pytest.mark.parametrize("language, expected", [("es", SERVICE_ES), ("en", SERVICE_EN)])
async def test_service_failure_is_recovered(fake_openai, caplog, language, expected):
    client, completions = fake_openai(exc=ConnectionError("timeout"))
    dc = DescriptionClient(api_key="sk-test", client=client)

    with caplog.at_level(logging.ERROR):
        result = await dc.generate("cocina integral", language)

    assert result.text == expected
    assert result.error is GenerationError.SERVICE_ERROR
    assert len(completions.calls) == 1  # ingen retry
    assert "timeout" in caplog.text


@pytest.mark.anyio
async def test_empty_response_is_service_error(fake_openai):
    client, _ = fake_openai(content=None)
    result = await DescriptionClient(api_key="sk-test", client=client).generate("techo", "en")
    assert result.error is GenerationError.SERVICE_ERROR
    assert result.text == SERVICE_EN


@pytest.mark.anyio
async def test_list_content_is_joined(fake_openai):
    client, _ = fake_openai(content=[{"type": "text", "text": "Parte 1. "}, {"type": "text", "text": "Parte 2."}])
    result = await DescriptionClient(api_key="sk-test", client=client).generate("techo", "es")
    assert result.text == "Parte 1. Parte 2."


@pytest.mark.anyio
@pytest.mark.parametrize("prompt", ["", "   \n"])
async def test_blank_prompt_is_rejected_before_any_call(fake_openai, prompt):
    client, completions = fake_openai()
    with pytest.raises(ValueError):
        await DescriptionClient(api_key="sk-test", client=client).generate(prompt, "es")
    assert completions.calls == []


@pytest.mark.anyio
async def test_aclose_closes_sdk_client_once():
    closed = []

    async def close():
        closed.append(True)

    dc = DescriptionClient(api_key="sk-test", client=SimpleNamespace(close=close))
    await dc.aclose()
    await dc.aclose()

    assert closed == [True]
    assert dc._client is None


@pytest.mark.anyio
async def test_aclose_without_client_is_noop():
    dc = DescriptionClient(api_key="")
    await dc.aclose()
    assert dc._client is None


def test_real_sdk_client_does_not_retry():
    dc = DescriptionClient(api_key="sk-test", timeout=5)
    sdk = dc._get_client()
    assert sdk.max_retries == 0
    assert dc._get_client() is sdk
