# cotizaobra/core/render.py
"""
Render: Quote + templates/quote_document.html -> utskrivbar HTML

- Beräknar rad- och totalsummor via totals-modellen
- Formaterar pengar med valutaformatteraren (språket styr konventionen)
- Injicerar rader i <tbody> och summor i totals-boxen
- Ersätter alla [[nyckel]]-fält; okända placeholders rensas bort
All användartext HTML-escapas.
"""
from __future__ import annotations

import html
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cotizaobra.core.coerce import to_number
from cotizaobra.core.currency import CurrencyFormatter, format_currency, format_totals
from cotizaobra.core.quote import Language, Quote
from cotizaobra.core.strings import strings_for
from cotizaobra.core.totals import compute_totals, line_total

TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "templates" / "quote_document.html"

PLACEHOLDER_RE = re.compile(r"\[\[([a-zA-Z0-9_]+)\]\]")


def _esc(value: Any) -> str:
    return html.escape(str(value or ""))


def format_number(value: Any) -> str:
    """Antal/procent: heltal utan decimaler, annars max två decimaler."""
    num = to_number(value)
    if num == int(num):
        return str(int(num))
    return "{:.2f}".format(num).rstrip("0").rstrip(".")


def build_rows_html(
    quote: Quote,
    language: Union[Language, str],
    formatter: Optional[CurrencyFormatter] = None,
) -> str:
    rows: List[str] = []
    for item in quote.line_items:
        rows.append(
            "<tr>"
            "<td>{description}</td>"
            "<td class='mono'>{quantity}</td>"
            "<td>{unit}</td>"
            "<td>{material}</td>"
            "<td class='mono'>{unit_price}</td>"
            "<td class='mono'>{labor}</td>"
            "<td class='mono'>{total}</td>"
            "</tr>".format(
                description=_esc(item.description),
                quantity=format_number(item.quantity),
                unit=_esc(item.unit),
                material=_esc(item.material),
                unit_price=format_currency(to_number(item.unit_price), quote.currency, language, formatter),
                labor=format_currency(to_number(item.labor_unit_price), quote.currency, language, formatter),
                total=format_currency(line_total(item), quote.currency, language, formatter),
            )
        )
    return "\n          ".join(rows)


def build_document_context(
    quote: Quote,
    language: Union[Language, str],
    formatter: Optional[CurrencyFormatter] = None,
) -> Dict[str, str]:
    """
    Bygg context-dict med alla fält som templaten använder.
    Etiketter hämtas från språktabellen, belopp formateras enligt språket.
    """
    lang = Language(language)
    s = strings_for(lang)

    totals = compute_totals(quote)
    money = format_totals(totals, quote.currency, lang, formatter)

    description_html = "<br>".join(_esc(line) for line in quote.project_description.splitlines())

    context: Dict[str, str] = {
        "lang": lang.value,
        "document_title": _esc(s["title"]),
        "quote_for_label": _esc(s["quote_for"]),
        "project_name_label": _esc(s["project_name"]),
        "client_name_label": _esc(s["client_name"]),
        "address_label": _esc(s["address"]),
        "submission_deadline_label": _esc(s["submission_deadline"]),
        "project_description_label": _esc(s["project_description"]),
        "items_label": _esc(s["items"]),
        "description_label": _esc(s["description"]),
        "quantity_label": _esc(s["quantity"]),
        "unit_label": _esc(s["unit"]),
        "material_label": _esc(s["material"]),
        "unit_price_label": _esc(s["unit_price"]),
        "labor_label": _esc(s["labor"]),
        "total_label": _esc(s["total"]),
        "subtotal_label": _esc(s["subtotal"]),
        "tax_label": "{} ({}%)".format(_esc(s["tax"]), format_number(quote.tax_rate)),
        "grand_total_label": _esc(s["grand_total"]),
        "currency_label": _esc(s["currency"]),
        "project_name": _esc(quote.project_name),
        "client_name": _esc(quote.client_name),
        "address": _esc(quote.address),
        "submission_deadline": _esc(quote.submission_deadline),
        "project_description": description_html,
        "currency": quote.currency.value,
        "rows_html": build_rows_html(quote, lang, formatter),
        "subtotal": money["subtotal"],
        "tax_amount": money["tax_amount"],
        "grand_total": money["grand_total"],
    }
    return context


def render_quote_html(context: Dict[str, Any], template_path: Path = TEMPLATE_PATH) -> str:
    """
    Läs HTML-templaten och ersätt alla [[nyckel]] med context-värden.
    Allt som inte finns i context ersätts med tom sträng.
    """
    doc = template_path.read_text(encoding="utf-8")

    # ett pass, så att [[...]] i användartext aldrig ersätts i sin tur
    def _sub(match: "re.Match[str]") -> str:
        return str(context.get(match.group(1), ""))

    return PLACEHOLDER_RE.sub(_sub, doc)


def render_quote(
    quote: Quote,
    language: Union[Language, str],
    formatter: Optional[CurrencyFormatter] = None,
) -> str:
    return render_quote_html(build_document_context(quote, language, formatter))
