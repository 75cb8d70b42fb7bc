"""Locale-aware money formatting backed by Babel."""
from __future__ import annotations

from babel.numbers import format_currency as _babel_format_currency


def format_currency(amount: float, currency: str = "KRW", locale: str = "ko_KR") -> str:
    """Render ``amount`` as localized currency text.

    Example::

        format_currency(3200000)                  # "₩3,200,000"
        format_currency(12.5, "USD", "en_US")     # "$12.50"
    """
    return _babel_format_currency(amount, currency, locale=locale)
