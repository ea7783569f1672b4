"""
TCMB Exchange Rate Source
Reads today's indicative rates from the Central Bank of the Republic of
Turkey (today.xml) and keeps the currencies listed in the catalog.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Mapping, Optional

import httpx

from app.config import settings
from app.domain.models import ExchangeRate
from app.domain.services.config_engine import DEFAULT_FLAG, AssetInfo
from app.infrastructure.rates.types import RateSourceError
from app.utils.time import now_local

logger = logging.getLogger(__name__)

_CURRENCY_BLOCK = re.compile(r"<Currency\b.*?</Currency>", re.DOTALL)
_CODE = re.compile(r'CurrencyCode="([^"]+)"')
_NAME = re.compile(r"<Isim>([^<]+)</Isim>")
_UNIT = re.compile(r"<Unit>([^<]*)</Unit>")
_FOREX_BUYING = re.compile(r"<ForexBuying>([^<]*)</ForexBuying>")
_FOREX_SELLING = re.compile(r"<ForexSelling>([^<]*)</ForexSelling>")


def _to_decimal(text: Optional[str]) -> Decimal:
    """Blank or malformed numbers read as zero"""
    try:
        value = Decimal((text or "").strip())
    except InvalidOperation:
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def parse_tcmb_xml(
    xml_text: str,
    currencies: Mapping[str, AssetInfo],
    fetched_at: Optional[datetime] = None,
) -> List[ExchangeRate]:
    """
    Extract forex buy/sell rates from a TCMB today.xml document.

    Only codes present in `currencies` are returned, named and flagged from
    the catalog. TCMB quotes some currencies per 100 units (JPY, IRR, ...);
    rates are divided by <Unit> so every rate is per single unit.
    """
    fetched_at = fetched_at or now_local()
    rates: List[ExchangeRate] = []

    for block in _CURRENCY_BLOCK.findall(xml_text or ""):
        code_match = _CODE.search(block)
        name_match = _NAME.search(block)
        buy_match = _FOREX_BUYING.search(block)
        sell_match = _FOREX_SELLING.search(block)
        if not (code_match and name_match and buy_match and sell_match):
            continue

        code = code_match.group(1).strip().upper()
        info = currencies.get(code)
        if info is None:
            continue

        unit_match = _UNIT.search(block)
        unit = _to_decimal(unit_match.group(1)) if unit_match else Decimal("1")
        if unit <= Decimal("0"):
            unit = Decimal("1")

        rates.append(ExchangeRate(
            code=code,
            name=info.name,
            buy_rate=_to_decimal(buy_match.group(1)) / unit,
            sell_rate=_to_decimal(sell_match.group(1)) / unit,
            flag=info.flag or DEFAULT_FLAG,
            last_update=fetched_at,
        ))

    return rates


class TCMBRateSource:
    """
    Live currency list from the TCMB XML feed.
    """

    def __init__(
        self,
        currencies: Mapping[str, AssetInfo],
        url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.currencies = dict(currencies)
        self.url = url or settings.RATE_SOURCE_URL
        self.timeout_seconds = timeout_seconds or settings.RATE_FETCH_TIMEOUT_SECONDS
        self._transport = transport

    async def fetch_rates(self) -> List[ExchangeRate]:
        """
        Raises:
            RateSourceError: On network failure or a non-200 response
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self.url)
        except httpx.HTTPError as exc:
            raise RateSourceError(f"TCMB request failed: {exc}") from exc

        if response.status_code != 200:
            raise RateSourceError(f"TCMB responded with HTTP {response.status_code}")

        rates = parse_tcmb_xml(response.text, self.currencies)
        logger.info("TCMB: parsed %d currencies", len(rates))
        return rates
