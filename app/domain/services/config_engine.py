"""
CONFIG ENGINE
Load, validate, and expose the asset catalog

RESPONSIBILITIES:
- Load YAML configuration files
- Validate configuration integrity
- Expose read-only typed objects

RULES:
❌ No defaults if config missing
✅ Fail fast on invalid config
✅ Deterministic output
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from app.domain.models import AssetClass, ExchangeRate
from app.domain.services.ledger import default_price_sources
from app.domain.services.price_sources import PriceSource

DEFAULT_FLAG = "🏳️"


@dataclass(frozen=True)
class AssetInfo:
    """One selectable asset in a catalog"""
    code: str
    name: str
    flag: Optional[str] = None


@dataclass(frozen=True)
class AssetCatalog:
    """Selectable assets per class"""
    currencies: List[AssetInfo]
    metals: List[AssetInfo]
    cryptos: List[AssetInfo]

    def for_class(self, asset_class: AssetClass) -> List[AssetInfo]:
        if asset_class == AssetClass.CURRENCY:
            return self.currencies
        if asset_class == AssetClass.METAL:
            return self.metals
        return self.cryptos

    def find(self, asset_class: AssetClass, code: str) -> Optional[AssetInfo]:
        code = (code or "").strip().upper()
        for info in self.for_class(asset_class):
            if info.code == code:
                return info
        return None

    def currency(self, code: str) -> Optional[AssetInfo]:
        return self.find(AssetClass.CURRENCY, code)


def _decimal(value, what: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid number for {what}: {value!r}")


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for catalog, markups and fallback rates
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = config_dir
        self._catalog: AssetCatalog = None
        self._markups: Dict[AssetClass, Decimal] = None
        self._fallback_rates: List[ExchangeRate] = None
        self._fallback_message: str = None

    def load_all(self) -> None:
        """Load all configuration files"""
        self._load_assets()
        self._load_fallback_rates()
        self._validate_all()

    def _read_yaml(self, name: str) -> dict:
        path = self.config_dir / name
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_assets(self) -> None:
        """Load asset catalog and simulated markups from assets.yml"""
        data = self._read_yaml("assets.yml")

        def _infos(key: str) -> List[AssetInfo]:
            return [
                AssetInfo(
                    code=str(item["code"]).upper(),
                    name=str(item["name"]),
                    flag=item.get("flag"),
                )
                for item in data.get(key, [])
            ]

        self._catalog = AssetCatalog(
            currencies=_infos("currencies"),
            metals=_infos("metals"),
            cryptos=_infos("cryptos"),
        )

        markup = data.get("simulated_markup") or {}
        self._markups = {
            AssetClass.METAL: _decimal(markup["metal"], "simulated_markup.metal"),
            AssetClass.CRYPTO: _decimal(markup["crypto"], "simulated_markup.crypto"),
        }

    def _load_fallback_rates(self) -> None:
        """Load the static currency list from fallback_rates.yml"""
        data = self._read_yaml("fallback_rates.yml")
        self._fallback_message = data.get("message") or "Showing sample rates"

        rates = []
        for item in data.get("rates", []):
            code = str(item["code"]).upper()
            info = self._catalog.currency(code)
            if info is None:
                raise ValueError(f"Fallback rate for unknown currency: {code}")
            rates.append(ExchangeRate(
                code=code,
                name=info.name,
                buy_rate=_decimal(item["buy"], f"{code}.buy"),
                sell_rate=_decimal(item["sell"], f"{code}.sell"),
                flag=info.flag or DEFAULT_FLAG,
            ))
        self._fallback_rates = rates

    def _validate_all(self) -> None:
        for asset_class in AssetClass:
            codes = [info.code for info in self._catalog.for_class(asset_class)]
            if not codes:
                raise ValueError(f"Empty {asset_class.value} catalog")
            if len(codes) != len(set(codes)):
                raise ValueError(f"Duplicate {asset_class.value} codes in configuration")

        for asset_class, factor in self._markups.items():
            if factor <= Decimal("0"):
                raise ValueError(f"Markup for {asset_class.value} must be positive")
            if factor >= Decimal("100") or -factor.normalize().as_tuple().exponent > 6:
                raise ValueError(
                    f"Markup for {asset_class.value} must be below 100 with at most 6 decimals"
                )

        if not self._fallback_rates:
            raise ValueError("Fallback rate table cannot be empty")
        for rate in self._fallback_rates:
            if rate.buy_rate <= Decimal("0") or rate.sell_rate <= Decimal("0"):
                raise ValueError(f"Fallback rate for {rate.code} must be positive")

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> AssetCatalog:
        return self._catalog

    @property
    def fallback_rates(self) -> List[ExchangeRate]:
        return list(self._fallback_rates)

    @property
    def fallback_message(self) -> str:
        return self._fallback_message

    def markup(self, asset_class: AssetClass) -> Decimal:
        return self._markups[asset_class]

    def currency_names(self) -> Dict[str, AssetInfo]:
        return {info.code: info for info in self._catalog.currencies}

    def price_sources(self) -> Dict[AssetClass, PriceSource]:
        """Ledger price policies built from the configured markups"""
        return default_price_sources(
            metal_markup=self._markups[AssetClass.METAL],
            crypto_markup=self._markups[AssetClass.CRYPTO],
        )
