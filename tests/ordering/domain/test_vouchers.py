"""Tests for voucher validation, applicability and lookup."""

from datetime import timedelta
from decimal import Decimal

import pytest
from ordering.cart.vouchers import InapplicableReason, Voucher, VoucherKind, find_voucher, usable_vouchers
from pydantic import ValidationError as SchemaError


def _voucher(now, code="SAVE10", kind="fix", value=10, min_order=0, expires_in=timedelta(days=1), disabled=False):
    return Voucher.model_validate(
        {
            "id": 7,
            "code": code,
            "type": kind,
            "value": value,
            "minOrderValue": min_order,
            "expiryDate": (now + expires_in).isoformat(),
            "isDisabled": disabled,
        }
    )


class TestVoucherWireShape:
    def test_decodes_backend_json(self, now):
        voucher = _voucher(now, kind="percentage", value=15, min_order=50)
        assert voucher.kind is VoucherKind.PERCENTAGE
        assert voucher.value == Decimal("15")
        assert voucher.min_order_value == Decimal("50")

    def test_naive_expiry_is_utc(self):
        voucher = Voucher.model_validate(
            {"id": 1, "code": "X", "type": "fix", "value": 1, "expiryDate": "2030-01-01T00:00:00"}
        )
        assert voucher.expiry_date.utcoffset() == timedelta(0)

    def test_serializes_type_alias(self, now):
        wire = _voucher(now).to_wire()
        assert wire["type"] == "fix"
        assert wire["minOrderValue"] == 0.0

    @pytest.mark.parametrize("value", [0, -5, 100.5])
    def test_rejects_out_of_range_percentage(self, now, value):
        with pytest.raises(SchemaError):
            _voucher(now, kind="percentage", value=value)

    def test_rejects_non_positive_fixed(self, now):
        with pytest.raises(SchemaError):
            _voucher(now, value=0)


class TestApplicability:
    def test_applicable(self, now):
        assert _voucher(now, min_order=50).inapplicability_reason(Decimal("50.00"), now) is None

    def test_disabled(self, now):
        voucher = _voucher(now, disabled=True)
        assert voucher.inapplicability_reason(Decimal("100"), now) is InapplicableReason.DISABLED

    def test_expired(self, now):
        voucher = _voucher(now, expires_in=timedelta(minutes=-1))
        assert voucher.inapplicability_reason(Decimal("100"), now) is InapplicableReason.EXPIRED

    def test_below_minimum(self, now):
        voucher = _voucher(now, min_order=50)
        assert voucher.inapplicability_reason(Decimal("49.99"), now) is InapplicableReason.BELOW_MINIMUM

    def test_usable_vouchers_filters(self, now):
        good = _voucher(now, code="GOOD")
        expired = _voucher(now, code="OLD", expires_in=timedelta(days=-1))
        too_big = _voucher(now, code="BIG", min_order=500)

        assert usable_vouchers([good, expired, too_big], Decimal("60"), now) == [good]


class TestLookup:
    def test_find_is_case_insensitive(self, now):
        voucher = _voucher(now, code="SAVE10")
        assert find_voucher([voucher], " save10 ") is voucher

    def test_find_missing(self, now):
        assert find_voucher([_voucher(now)], "NOPE") is None

    def test_describe(self, now):
        assert _voucher(now, value=10).describe() == "$10.00"
        assert _voucher(now, kind="percentage", value=20).describe() == "20%"
        assert _voucher(now, kind="percentage", value=Decimal("12.50")).describe() == "12.5%"
