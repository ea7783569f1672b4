from decimal import Decimal

import pytest

from app.domain.models import AssetClass
from app.domain.services.config_engine import ConfigEngine


def test_catalog_loaded(config_engine):
    catalog = config_engine.catalog

    assert [m.code for m in catalog.metals] == ["XAU", "XAG", "XPT", "XPD"]
    assert "BTC" in [c.code for c in catalog.cryptos]
    usd = catalog.currency("USD")
    assert usd.name == "Amerikan Doları"
    assert usd.flag == "🇺🇸"


def test_markups(config_engine):
    assert config_engine.markup(AssetClass.METAL) == Decimal("1.08")
    assert config_engine.markup(AssetClass.CRYPTO) == Decimal("1.12")

    sources = config_engine.price_sources()
    assert sources[AssetClass.METAL].factor == Decimal("1.08")


def test_fallback_table(config_engine):
    rates = {rate.code: rate for rate in config_engine.fallback_rates}

    assert 8 <= len(rates) <= 12
    assert {"USD", "EUR"} <= set(rates)
    assert rates["USD"].sell_rate == Decimal("32.25")
    assert rates["EUR"].name == "Euro"
    assert config_engine.fallback_message


def _write_config(tmp_path, assets: str, fallback: str):
    (tmp_path / "assets.yml").write_text(assets, encoding="utf-8")
    (tmp_path / "fallback_rates.yml").write_text(fallback, encoding="utf-8")
    return ConfigEngine(tmp_path)


ASSETS = """
currencies:
  - {code: USD, name: Dollar}
metals:
  - {code: XAU, name: Gold}
cryptos:
  - {code: BTC, name: Bitcoin}
simulated_markup:
  metal: "%s"
  crypto: "1.12"
"""

FALLBACK = """
rates:
  - {code: USD, buy: "1", sell: "2"}
"""


def test_missing_file_fails_fast(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigEngine(tmp_path).load_all()


def test_non_positive_markup_rejected(tmp_path):
    engine = _write_config(tmp_path, ASSETS % "0", FALLBACK)
    with pytest.raises(ValueError):
        engine.load_all()


def test_fallback_for_unknown_currency_rejected(tmp_path):
    engine = _write_config(
        tmp_path, ASSETS % "1.08", 'rates:\n  - {code: GBP, buy: "1", sell: "2"}\n'
    )
    with pytest.raises(ValueError):
        engine.load_all()


def test_default_flag_when_missing(tmp_path):
    engine = _write_config(tmp_path, ASSETS % "1.08", FALLBACK)
    engine.load_all()

    assert engine.fallback_rates[0].flag == "🏳️"


@pytest.mark.parametrize("factor", ["100", "1.0000001"])
def test_markup_too_large_or_precise_rejected(tmp_path, factor):
    engine = _write_config(tmp_path, ASSETS % factor, FALLBACK)
    with pytest.raises(ValueError):
        engine.load_all()


def test_catalog_find_is_per_class(config_engine):
    catalog = config_engine.catalog
    assert catalog.find(AssetClass.METAL, " xau ").name == "Altın"
    assert catalog.find(AssetClass.CRYPTO, "XAU") is None
    assert catalog.find(AssetClass.CRYPTO, "doge").code == "DOGE"
