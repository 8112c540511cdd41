"""Tests for the display route and flash-loan wire models."""

import json

import pytest
from pydantic import ValidationError

from flashroute.models.execution import Asset, AssetInfo, FlashLoan, FlashLoanMessage
from flashroute.models.route import RouteObject, RouteStep, RouteToken
from tests.helpers import ATOM, OSMO, make_token


def _step(src: RouteToken, dst: RouteToken, pool_id: str = "1") -> RouteStep:
    return RouteStep(
        pool_id=pool_id, swap_fee="0.002", from_token=src, to_token=dst, pool_provider="OSMO/ATOM"
    )


class TestRouteToken:
    """Tests for RouteToken placeholders."""

    def test_make_uppercases_and_builds_logo(self):
        token = RouteToken.make("statom", "ibc/ABC", 6)
        assert token.symbol == "STATOM"
        assert token.logo == "/images/statom.png"

    def test_make_with_missing_fields(self):
        """Missing symbol, denom and decimals are replaced by placeholders."""
        token = RouteToken.make(None, None, None, error="missing")
        assert token.symbol == "UNKNOWN"
        assert token.denom == "unknown_denom"
        assert token.decimals == 6
        assert token.error == "missing"

    def test_with_error_keeps_existing_error(self):
        token = RouteToken.make("A", "ua", error="first")
        assert token.with_error("second").error == "first"
        assert RouteToken.make("A", "ua").with_error("second").error == "second"

    def test_from_token(self):
        token = RouteToken.from_token(make_token(ATOM))
        assert (token.symbol, token.denom, token.decimals) == ("ATOM", ATOM, 6)


class TestRouteObject:
    """Tests for RouteObject serialization and chaining."""

    def test_wire_field_names(self):
        """JSON uses the display field names."""
        osmo = RouteToken.make("OSMO", OSMO, 6)
        atom = RouteToken.make("ATOM", ATOM, 6)
        route = RouteObject(from_token=osmo, to_token=osmo, steps=[_step(osmo, atom), _step(atom, osmo)])

        data = json.loads(route.to_json())
        assert set(data) == {"from", "to", "steps"}
        step = data["steps"][0]
        assert set(step) == {"poolId", "swapFee", "fromToken", "toToken", "poolProvider"}

    def test_is_chained(self):
        osmo = RouteToken.make("OSMO", OSMO, 6)
        atom = RouteToken.make("ATOM", ATOM, 6)
        chained = RouteObject(from_token=osmo, to_token=osmo, steps=[_step(osmo, atom), _step(atom, osmo)])
        broken = RouteObject(from_token=osmo, to_token=osmo, steps=[_step(osmo, atom), _step(osmo, osmo)])
        assert chained.is_chained
        assert not broken.is_chained

    def test_parses_wire_names(self):
        osmo = RouteToken.make("OSMO", OSMO, 6).model_dump()
        route = RouteObject.model_validate({"from": osmo, "to": osmo, "steps": [], "error": "x"})
        assert route.hop_count == 0
        assert route.error == "x"


class TestAssetInfo:
    """Tests for the native/contract asset union."""

    def test_exactly_one_side(self):
        with pytest.raises(ValidationError):
            AssetInfo()

    def test_native_and_contract(self):
        assert AssetInfo.native(OSMO).is_native
        contract = AssetInfo.contract("osmo1token")
        assert not contract.is_native
        assert contract.identifier == "osmo1token"

    def test_flash_loan_json_omits_unset_side(self):
        message = FlashLoanMessage(
            flash_loan=FlashLoan(assets=[Asset(info=AssetInfo.native(OSMO), amount="10")], msgs=[])
        )
        data = json.loads(message.to_json())
        assert data == {
            "flash_loan": {
                "assets": [{"info": {"native_token": {"denom": OSMO}}, "amount": "10"}],
                "msgs": [],
            }
        }
