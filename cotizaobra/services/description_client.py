from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from openai import AsyncOpenAI

from cotizaobra.core.quote import Language
from cotizaobra.core.strings import strings_for
from cotizaobra.server.settings.config import settings

logger = logging.getLogger(__name__)


SYSTEM_MESSAGE = (
    "You are an assistant that writes project descriptions for "
    "construction and renovation proposals."
)

LANGUAGE_INSTRUCTIONS = {
    Language.ES: "Escribe en español formal y profesional.",
    Language.EN: "Write in professional, formal English.",
}

PROMPT_TEMPLATE = """
Based on the following key points for a construction/renovation proposal, write a compelling and professional project description.
The description should be well-structured, clear, and persuasive.
{language_instruction}

Key Points:
---
{key_points}
---
"""


class GenerationError(str, Enum):
    UNCONFIGURED = "unconfigured"
    SERVICE_ERROR = "service_error"


@dataclass(frozen=True)
class GenerationResult:
    """
    Resultatet av ett genereringsanrop.
    Vid fel är text den fasta felsträngen för språket och error satt.
    """
    text: str
    error: Optional[GenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_description_prompt(prompt_text: str, language: Union[Language, str]) -> str:
    """
    Bygger hela prompten: fast instruktion + språkdirektiv + användarens
    nyckelpunkter ordagrant mellan ---.
    """
    return PROMPT_TEMPLATE.format(
        language_instruction=LANGUAGE_INSTRUCTIONS[Language(language)],
        key_points=prompt_text,
    )


def _content_to_text(raw: Any) -> Optional[str]:
    # Hantera både str och ev. list-format från klienten
    if isinstance(raw, list):
        parts = []
        for part in raw:
            if isinstance(part, dict) and "text" in part:
                parts.append(str(part["text"]))
            else:
                parts.append(str(part))
        raw = "".join(parts)
    return raw


class DescriptionClient:
    """
    Klient för AI-genererade projektbeskrivningar.

    Ett anrop per generate(): ingen retry, ingen cache, ingen kö.
    Alla fel fångas här och blir en fast felsträng på rätt språk;
    orsaken loggas men visas aldrig för slutanvändaren.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Any = None,
    ) -> None:
        self.api_key = (settings.openai_api_key if api_key is None else api_key).strip()
        self.model = model or settings.openai_model
        self.timeout = settings.openai_timeout if timeout is None else timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            # max_retries=0: SDK:n gör annars egna omförsök
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def aclose(self) -> None:
        """Stänger SDK-klientens http-pool (om den har skapats)."""
        if self._client is None:
            return
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()
        self._client = None

    async def generate(self, prompt_text: str, language: Union[Language, str]) -> GenerationResult:
        lang = Language(language)
        s = strings_for(lang)

        if not prompt_text or not prompt_text.strip():
            raise ValueError("prompt_text är tom; generate() ska inte anropas utan nyckelpunkter")

        if not self.configured:
            logger.warning("OPENAI_API_KEY saknas – ingen beskrivning genereras.")
            return GenerationResult(text=s["error_unconfigured"], error=GenerationError.UNCONFIGURED)

        full_prompt = build_description_prompt(prompt_text, lang)

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": full_prompt},
                ],
            )
            text = _content_to_text(response.choices[0].message.content)
            if not text:
                raise RuntimeError("Tomt svar från genereringstjänsten")
        except Exception:  # noqa: BLE001
            logger.exception("Fel vid generering av beskrivning (model=%s)", self.model)
            return GenerationResult(text=s["error_service"], error=GenerationError.SERVICE_ERROR)

        return GenerationResult(text=text)

