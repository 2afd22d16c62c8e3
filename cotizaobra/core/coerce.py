"""
Tolerant talkonvertering för offertens redigerbara fält.

Medan användaren skriver kan antal/priser/moms innehålla tillfällig text
("", "1.", "abc"). Här blir allt ett ändligt float; det som inte går att
tolka blir 0. Funktionen kastar aldrig undantag.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def to_number(value: Any) -> float:
    """
    Gör om ett godtyckligt värde till ett ändligt float.

      - ändliga int/float/Decimal -> samma värde som float
      - numerisk text ("12", " 3.5 ", "1e3") -> dess värde
      - "", None, ogiltig text, NaN/inf, bool och andra typer -> 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float, Decimal)):
        try:
            num = float(value)
        except (OverflowError, ValueError):
            return 0.0
        return num if math.isfinite(num) else 0.0

    if isinstance(value, str):
        s = value.strip()
        # float() godtar "1_000", men det är inget tal en användare skriver
        if not s or "_" in s:
            return 0.0
        try:
            num = float(s)
        except ValueError:
            return 0.0
        return num if math.isfinite(num) else 0.0

    return 0.0
