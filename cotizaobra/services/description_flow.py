"""
Flödet runt AI-beskrivningen, sett från anroparen:

    IDLE -> REQUESTING -> SUCCEEDED | FAILED

SUCCEEDED/FAILED är slutlägen för just den begäran; en ny begäran startar
om från dem. Medan en begäran pågår (is_busy) ska knappen vara avstängd,
och start_generation() vägrar en andra start.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from cotizaobra.core.quote import Language, Quote, insert_description
from cotizaobra.services.description_client import DescriptionClient, GenerationError, GenerationResult


class GenerationStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GenerationInProgressError(RuntimeError):
    """En begäran pågår redan för det här utkastet."""


@dataclass(frozen=True)
class DescriptionDraft:
    prompt: str = ""
    language: Language = Language.ES
    status: GenerationStatus = GenerationStatus.IDLE
    text: str = ""
    error: Optional[GenerationError] = None

    @property
    def is_busy(self) -> bool:
        return self.status is GenerationStatus.REQUESTING

    @property
    def can_generate(self) -> bool:
        return not self.is_busy and bool(self.prompt.strip())

    @property
    def can_insert(self) -> bool:
        return self.status is GenerationStatus.SUCCEEDED and bool(self.text)


def start_generation(draft: DescriptionDraft) -> DescriptionDraft:
    if draft.is_busy:
        raise GenerationInProgressError("Generering pågår redan")
    if not draft.prompt.strip():
        raise ValueError("Tom prompt – inget att generera")
    return replace(draft, status=GenerationStatus.REQUESTING, text="", error=None)


def settle_generation(draft: DescriptionDraft, result: GenerationResult) -> DescriptionDraft:
    if not draft.is_busy:
        raise ValueError(f"Kan inte avsluta en begäran i läge {draft.status.value}")
    status = GenerationStatus.SUCCEEDED if result.ok else GenerationStatus.FAILED
    return replace(draft, status=status, text=result.text, error=result.error)


async def run_generation(draft: DescriptionDraft, client: DescriptionClient) -> DescriptionDraft:
    """
    Kör hela övergången. Tom prompt -> utkastet returneras oförändrat
    och inget anrop görs.
    """
    if not draft.can_generate:
        if draft.is_busy:
            raise GenerationInProgressError("Generering pågår redan")
        return draft

    requesting = start_generation(draft)
    result = await client.generate(requesting.prompt, requesting.language)
    return settle_generation(requesting, result)


def apply_draft(quote: Quote, draft: DescriptionDraft) -> Quote:
    """Lägger in genererad text i offerten; misslyckade utkast ändrar inget."""
    if not draft.can_insert:
        return quote
    return insert_description(quote, draft.text)
