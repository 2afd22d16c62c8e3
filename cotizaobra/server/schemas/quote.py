# cotizaobra/server/schemas/quote.py
from pydantic import BaseModel
from typing import Dict, List, Optional, Union

from cotizaobra.core.quote import (
    DEFAULT_TAX_RATE,
    DEFAULT_UNIT,
    Currency,
    Language,
    Quote,
    quote_from_dict,
)
from cotizaobra.server.settings.config import settings
from cotizaobra.services.description_client import GenerationError
from cotizaobra.services.description_flow import GenerationStatus

# Numeriska fält tas emot som de skrivits i formuläret (tal eller text);
# tolkningen sker i totals-modellen.
NumericField = Union[float, str, None]


class LineItemIn(BaseModel):
    id: Optional[str] = None     # saknas -> nytt id tilldelas
    description: str = ""
    quantity: NumericField = 1.0
    unit: str = DEFAULT_UNIT
    material: str = ""
    unit_price: NumericField = 0.0
    labor_unit_price: NumericField = 0.0


class QuoteIn(BaseModel):
    project_name: str = ""
    client_name: str = ""
    address: str = ""
    submission_deadline: str = ""
    line_items: List[LineItemIn] = []
    tax_rate: NumericField = float(DEFAULT_TAX_RATE)
    project_description: str = ""
    currency: Currency = Currency.MXN

    def to_quote(self) -> Quote:
        return quote_from_dict(self.model_dump())


class LineTotalOut(BaseModel):
    id: str
    line_total: float
    line_total_formatted: str


class TotalsOut(BaseModel):
    currency: Currency
    language: Language
    subtotal: float
    tax_amount: float
    grand_total: float
    formatted: Dict[str, str]
    line_totals: List[LineTotalOut]


class DescriptionIn(BaseModel):
    """
    Payload till /descriptions/generate.
    prompt = hantverkarens nyckelpunkter, t.ex. "Piso para 2000 pies², 15 escalones".
    """
    prompt: str
    language: Language = Language(settings.default_language)


class DescriptionOut(BaseModel):
    text: str
    ok: bool
    error: Optional[GenerationError] = None
    status: GenerationStatus
