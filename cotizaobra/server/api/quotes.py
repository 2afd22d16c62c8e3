from fastapi import APIRouter, Body, Query
from fastapi.responses import HTMLResponse

from cotizaobra.core.currency import format_currency, format_totals
from cotizaobra.core.quote import (
    Language,
    add_line_item,
    initial_quote,
    new_line_item,
    quote_to_dict,
    remove_line_item,
)
from cotizaobra.core.render import render_quote
from cotizaobra.core.strings import strings_for
from cotizaobra.core.totals import compute_totals, line_totals
from cotizaobra.server.schemas.quote import LineTotalOut, QuoteIn, TotalsOut
from cotizaobra.server.settings.config import settings

router = APIRouter(prefix="/quotes", tags=["quotes"])

DEFAULT_LANGUAGE = Language(settings.default_language)


# ==============================
# MALL
# ==============================

@router.get("/template", summary="Ny offert från startmallen")
def get_template(language: Language = Query(DEFAULT_LANGUAGE)):
    quote = initial_quote(unit=strings_for(language)["default_unit"])
    return quote_to_dict(quote)


# ==============================
# SUMMOR
# ==============================

@router.post("/totals", response_model=TotalsOut, summary="Beräkna rad- och offertsummor")
def post_totals(payload: QuoteIn, language: Language = Query(DEFAULT_LANGUAGE)):
    quote = payload.to_quote()
    totals = compute_totals(quote)

    return TotalsOut(
        currency=quote.currency,
        language=language,
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        grand_total=totals.grand_total,
        formatted=format_totals(totals, quote.currency, language),
        line_totals=[
            LineTotalOut(
                id=item_id,
                line_total=total,
                line_total_formatted=format_currency(total, quote.currency, language),
            )
            for item_id, total in line_totals(quote)
        ],
    )


# ==============================
# RADER
# ==============================

@router.post("/line-items", summary="Lägg till en tom rad sist")
def post_line_item(payload: QuoteIn, language: Language = Query(DEFAULT_LANGUAGE)):
    quote = payload.to_quote()
    item = new_line_item(unit=strings_for(language)["default_unit"])
    return quote_to_dict(add_line_item(quote, item))


@router.delete("/line-items/{item_id}", summary="Ta bort en rad")
def delete_line_item(item_id: str, payload: QuoteIn = Body(...)):
    return quote_to_dict(remove_line_item(payload.to_quote(), item_id))


# ==============================
# UTSKRIFT
# ==============================

@router.post("/document", response_class=HTMLResponse, summary="Utskrivbar offert (HTML)")
def post_document(payload: QuoteIn, language: Language = Query(DEFAULT_LANGUAGE)):
    html = render_quote(payload.to_quote(), language)
    return HTMLResponse(content=html)
