# /educenter/services/currency_service.py

"""
UZS to USD conversion for the reports.

The rate comes from a public daily feed. The lookup is bounded by
`CURRENCY_TIMEOUT_SECONDS`; when the feed is slow, down or returns something
unexpected the configured fallback rate is used and the request carries on.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

import requests

from educenter.core.config import settings

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def get_usd_rate() -> Decimal:
    """How many US dollars one sum buys."""
    try:
        response = requests.get(settings.CURRENCY_RATE_URL, timeout=settings.CURRENCY_TIMEOUT_SECONDS)
        response.raise_for_status()
        rate = Decimal(str(response.json()["usd"]["rate"]))
        if rate <= 0:
            raise ValueError(f"non-positive rate {rate}")
        return rate
    except (requests.RequestException, KeyError, TypeError, ValueError, ArithmeticError) as e:
        logger.warning("Currency lookup failed, using fallback rate %s: %s", settings.FALLBACK_USD_RATE, e)
        return settings.FALLBACK_USD_RATE


def to_usd(amount, rate: Decimal) -> Decimal:
    return (Decimal(str(amount or 0)) * rate).quantize(CENT, rounding=ROUND_HALF_UP)


def usd_string(amount, rate: Decimal) -> str:
    """Formats a sum amount as dollars, e.g. "$7.90"."""
    return f"${to_usd(amount, rate):.2f}"
