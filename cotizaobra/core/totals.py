# cotizaobra/core/totals.py
"""
Totals: rad- och offertsummor ur en Quote.

  line_total  = antal * (à-pris material + à-pris arbete)
  subtotal    = summan av alla line_total (tom lista -> 0)
  tax_amount  = subtotal * (moms % / 100)
  grand_total = subtotal + tax_amount

Alla numeriska fält går genom to_number() först, så halvfärdig inmatning
ger aldrig fel. Ren funktion utan sidoeffekter; ingen avrundning här
(det sköter valutaformatteringen).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from cotizaobra.core.coerce import to_number
from cotizaobra.core.quote import LineItem, Quote


@dataclass(frozen=True)
class QuoteTotals:
    subtotal: float
    tax_amount: float
    grand_total: float


def line_total(item: LineItem) -> float:
    quantity = to_number(item.quantity)
    unit_price = to_number(item.unit_price)
    labor_unit_price = to_number(item.labor_unit_price)
    return quantity * (unit_price + labor_unit_price)


def line_totals(quote: Quote) -> List[Tuple[str, float]]:
    """(rad-id, radsumma) i visningsordning."""
    return [(item.id, line_total(item)) for item in quote.line_items]


def compute_totals(quote: Quote) -> QuoteTotals:
    subtotal = 0.0
    for item in quote.line_items:
        subtotal += line_total(item)

    tax_rate = to_number(quote.tax_rate)
    tax_amount = subtotal * (tax_rate / 100)
    grand_total = subtotal + tax_amount

    return QuoteTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        grand_total=grand_total,
    )
