"""
Datamodell för cotizaciones (Quote + LineItem) och rena uppdateringsfunktioner.

Tillståndet skickas alltid in och en ny Quote returneras; inget muteras
in-place och det finns inga globala singletons. Numeriska fält sparas som
de matades in (kan tillfälligt vara text) och tolkas först i totals-modellen.
"""
from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Currency(str, Enum):
    USD = "USD"
    CAD = "CAD"
    MXN = "MXN"


class Language(str, Enum):
    ES = "es"
    EN = "en"


DEFAULT_UNIT = "unit"
DEFAULT_TAX_RATE = 16
DEFAULT_CURRENCY = Currency.MXN


def new_line_item_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LineItem:
    id: str = field(default_factory=new_line_item_id)
    description: str = ""
    quantity: Any = 1
    unit: str = DEFAULT_UNIT
    material: str = ""
    unit_price: Any = 0
    labor_unit_price: Any = 0


@dataclass(frozen=True)
class Quote:
    project_name: str = ""
    client_name: str = ""
    address: str = ""
    submission_deadline: str = ""
    line_items: Tuple[LineItem, ...] = ()
    tax_rate: Any = DEFAULT_TAX_RATE
    project_description: str = ""
    currency: Currency = DEFAULT_CURRENCY


LINE_ITEM_FIELDS = frozenset(f.name for f in fields(LineItem))
QUOTE_FIELDS = frozenset(f.name for f in fields(Quote))


# -------------------------------------------------------------
#  Skapa / återställa
# -------------------------------------------------------------

def new_line_item(**overrides: Any) -> LineItem:
    """
    Ny rad med standardvärden (quantity=1, unit="unit", priser 0).
    Ett nytt id genereras alltid om det inte skickas med explicit.
    """
    unknown = set(overrides) - LINE_ITEM_FIELDS
    if unknown:
        raise ValueError(f"Okända fält för LineItem: {sorted(unknown)}")
    return LineItem(**overrides)


def initial_quote(*, unit: str = DEFAULT_UNIT) -> Quote:
    """Startmallen för en ny redigeringssession: tomma fält och en tom rad."""
    return Quote(line_items=(new_line_item(unit=unit),))


def reset_quote(*, unit: str = DEFAULT_UNIT) -> Quote:
    return initial_quote(unit=unit)


# -------------------------------------------------------------
#  Rader
# -------------------------------------------------------------

def add_line_item(quote: Quote, item: Optional[LineItem] = None) -> Quote:
    if item is None:
        item = new_line_item()
    if any(existing.id == item.id for existing in quote.line_items):
        raise ValueError(f"Rad-id finns redan i offerten: {item.id}")
    return replace(quote, line_items=quote.line_items + (item,))


def update_line_item(quote: Quote, item_id: str, field_name: str, value: Any) -> Quote:
    """
    Byter ett fält på en rad. Okänt id -> offerten returneras oförändrad.
    id går inte att ändra.
    """
    if field_name == "id" or field_name not in LINE_ITEM_FIELDS:
        raise ValueError(f"Fältet går inte att redigera på en rad: {field_name!r}")

    return replace(
        quote,
        line_items=tuple(
            replace(item, **{field_name: value}) if item.id == item_id else item
            for item in quote.line_items
        ),
    )


def remove_line_item(quote: Quote, item_id: str) -> Quote:
    return replace(
        quote,
        line_items=tuple(item for item in quote.line_items if item.id != item_id),
    )


# -------------------------------------------------------------
#  Offertfält
# -------------------------------------------------------------

def update_quote_field(quote: Quote, field_name: str, value: Any) -> Quote:
    if field_name == "line_items" or field_name not in QUOTE_FIELDS:
        raise ValueError(f"Fältet går inte att redigera på offerten: {field_name!r}")
    if field_name == "currency":
        value = Currency(value)
    return replace(quote, **{field_name: value})


def insert_description(quote: Quote, text: str) -> Quote:
    """Ersätter projektbeskrivningen helt (t.ex. med AI-genererad text)."""
    return replace(quote, project_description=text)


# -------------------------------------------------------------
#  Gränssnitt mot presentationslagret (dict/JSON)
# -------------------------------------------------------------

def quote_from_dict(data: Dict[str, Any]) -> Quote:
    """
    Bygger en Quote från en dict (t.ex. JSON från frontend).
    Saknade fält får standardvärden; rader utan id får ett nytt id.
    Två rader med samma id -> ValueError.
    """
    data = dict(data or {})
    unknown = set(data) - QUOTE_FIELDS
    if unknown:
        raise ValueError(f"Okända fält för Quote: {sorted(unknown)}")

    raw_items = data.pop("line_items", None) or []
    items = []
    for raw in raw_items:
        raw = dict(raw)
        if not raw.get("id"):
            raw.pop("id", None)
        item = new_line_item(**raw)
        if any(existing.id == item.id for existing in items):
            raise ValueError(f"Rad-id förekommer flera gånger: {item.id}")
        items.append(item)

    if "currency" in data:
        data["currency"] = Currency(data["currency"])

    return Quote(line_items=tuple(items), **data)


def quote_to_dict(quote: Quote) -> Dict[str, Any]:
    d = asdict(quote)
    d["currency"] = quote.currency.value
    d["line_items"] = [dict(item) for item in d["line_items"]]
    return d
