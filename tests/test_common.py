"""Tests for display formatting, entitlements and models."""
import pytest
from pydantic import ValidationError

from common.entitlements import StaticEntitlementProvider
from common.formatting import format_change, format_price, format_volume
from common.logger import new_request_id, request_id_var
from common.models import AssetSnapshot


class TestFormatting:
    def test_sub_dollar_price_has_six_decimals(self):
        assert format_price(0.0001234) == "0.000123"

    def test_large_price_grouped(self):
        assert format_price(64250.5) == "$64,250.5"
        assert format_price(64250.0) == "$64,250"

    def test_large_price_keeps_at_most_three_decimals(self):
        assert format_price(1234.5678) == "$1,234.568"
        assert format_price(1.0) == "$1"

    def test_missing_price(self):
        assert format_price(None) == "N/A"

    def test_change(self):
        assert format_change(3.14159) == "+3.14%"
        assert format_change(-0.5) == "-0.50%"
        assert format_change(0.0) == "N/A"
        assert format_change(None) == "N/A"

    def test_volume_in_billions(self):
        assert format_volume(2.5e10) == "$25.0B"
        assert format_volume(None) == "N/A"
        assert format_volume(0) == "N/A"


class TestEntitlements:
    def test_case_insensitive(self):
        provider = StaticEntitlementProvider(["Pro@Example.com "])
        assert provider.is_pro("pro@example.com")

    def test_anonymous_is_not_pro(self):
        provider = StaticEntitlementProvider(["pro@example.com"])
        assert not provider.is_pro(None)
        assert not provider.is_pro("")

    def test_empty_list(self):
        assert not StaticEntitlementProvider([]).is_pro("pro@example.com")


class TestModels:
    def test_snapshot_is_immutable(self):
        snap = AssetSnapshot(id="x", symbol="X", name="X", price=1.0)
        with pytest.raises(ValidationError):
            snap.price = 2.0

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            AssetSnapshot(id="x", symbol="X", name="X", price=0)

    def test_ratio_undefined_without_both_sides(self):
        assert AssetSnapshot(id="x", symbol="X", name="X", price=1, volume=5).volume_to_cap is None
        assert AssetSnapshot(id="x", symbol="X", name="X", price=1, volume=5, market_cap=0).volume_to_cap is None
        assert AssetSnapshot(id="x", symbol="X", name="X", price=1, volume=5, market_cap=10).volume_to_cap == 0.5


def test_new_request_id_sets_context():
    rid = new_request_id()
    assert len(rid) == 8
    assert request_id_var.get() == rid
