# cotizaobra/core/currency.py
"""
Valutaformattering per visningsspråk.

Språket väljer lokal-konventionen (es -> es-MX, en -> en-US): tusentalsavgränsare,
decimaltecken och var valutasymbolen hamnar. Valutan väljer bara symbol/kod,
ingen växelkurs räknas någonsin.

    1234.5, USD, en -> "$1,234.50"
    1234.5, USD, es -> "USD 1,234.50"
    1234.5, MXN, es -> "$1,234.50"

Backend ligger bakom CurrencyFormatter så att den kan bytas utan att
totals-modellen påverkas.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Optional, Tuple, Union

from cotizaobra.core.quote import Currency, Language
from cotizaobra.core.totals import QuoteTotals

NBSP = "\u00a0"
CENTS = Decimal("0.01")


class UnsupportedFormatError(ValueError):
    """Okänd valuta, okänt språk eller belopp som inte går att formattera."""


@dataclass(frozen=True)
class LocaleConvention:
    locale: str
    group_separator: str
    decimal_separator: str
    # valuta -> (symbol, mellanrum mellan symbol och belopp)
    symbols: Dict[Currency, Tuple[str, str]]


LOCALE_CONVENTIONS: Dict[Language, LocaleConvention] = {
    Language.EN: LocaleConvention(
        locale="en-US",
        group_separator=",",
        decimal_separator=".",
        symbols={
            Currency.USD: ("$", ""),
            Currency.CAD: ("CA$", ""),
            Currency.MXN: ("MX$", ""),
        },
    ),
    Language.ES: LocaleConvention(
        locale="es-MX",
        group_separator=",",
        decimal_separator=".",
        symbols={
            Currency.MXN: ("$", ""),
            Currency.USD: ("USD", NBSP),
            Currency.CAD: ("CAD", NBSP),
        },
    ),
}


def _parse_currency(currency: Union[Currency, str]) -> Currency:
    try:
        return Currency(currency)
    except ValueError:
        raise UnsupportedFormatError(f"Valutan stöds inte: {currency!r}") from None


def _parse_language(language: Union[Language, str]) -> Language:
    try:
        return Language(language)
    except ValueError:
        raise UnsupportedFormatError(f"Språket stöds inte: {language!r}") from None


def _group_thousands(int_str: str, separator: str) -> str:
    """Grupperar heltalsdelen tre siffror i taget, från höger."""
    if len(int_str) <= 3:
        return int_str
    parts = []
    while int_str:
        parts.append(int_str[-3:])
        int_str = int_str[:-3]
    return separator.join(reversed(parts))


class CurrencyFormatter(ABC):
    @abstractmethod
    def format(
        self,
        amount: Any,
        currency: Union[Currency, str],
        language: Union[Language, str],
    ) -> str:
        raise NotImplementedError


class LocaleCurrencyFormatter(CurrencyFormatter):
    """
    Egen implementation av valutaformat enligt LOCALE_CONVENTIONS.
    Två decimaler, avrundning half-up. Belopp som avrundas till noll
    visas utan minustecken.
    """

    def __init__(self, conventions: Optional[Dict[Language, LocaleConvention]] = None) -> None:
        self.conventions = conventions or LOCALE_CONVENTIONS

    def format(
        self,
        amount: Any,
        currency: Union[Currency, str],
        language: Union[Language, str],
    ) -> str:
        cur = _parse_currency(currency)
        lang = _parse_language(language)

        convention = self.conventions.get(lang)
        if convention is None or cur not in convention.symbols:
            raise UnsupportedFormatError(
                f"Ingen formatregel för {cur.value} på språk {lang.value}"
            )

        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            raise UnsupportedFormatError(f"Beloppet är inget tal: {amount!r}")
        value = Decimal(str(amount))
        if not value.is_finite():
            raise UnsupportedFormatError(f"Beloppet är inte ändligt: {amount!r}")

        # standardkontexten har 28 siffror; stora belopp kräver fler för två decimaler
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + 4)
            value = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        int_part, dec_part = f"{value.copy_abs():.2f}".split(".")

        number = "{}{}{}".format(
            _group_thousands(int_part, convention.group_separator),
            convention.decimal_separator,
            dec_part,
        )
        symbol, gap = convention.symbols[cur]
        return f"{sign}{symbol}{gap}{number}"


DEFAULT_FORMATTER: CurrencyFormatter = LocaleCurrencyFormatter()


def format_currency(
    amount: Any,
    currency: Union[Currency, str],
    language: Union[Language, str],
    formatter: Optional[CurrencyFormatter] = None,
) -> str:
    return (formatter or DEFAULT_FORMATTER).format(amount, currency, language)


def format_totals(
    totals: QuoteTotals,
    currency: Union[Currency, str],
    language: Union[Language, str],
    formatter: Optional[CurrencyFormatter] = None,
) -> Dict[str, str]:
    return {
        "subtotal": format_currency(totals.subtotal, currency, language, formatter),
        "tax_amount": format_currency(totals.tax_amount, currency, language, formatter),
        "grand_total": format_currency(totals.grand_total, currency, language, formatter),
    }
