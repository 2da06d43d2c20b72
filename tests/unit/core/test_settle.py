import math
from decimal import Decimal
from fractions import Fraction

import pytest

from modules.change_calculator.core.denominations import DenominationSet
from modules.change_calculator.core.render import render_settlement
from modules.change_calculator.core.settle import settle
from modules.change_calculator.core.validate import ReasonCode, Status


class TestSettle:
    def test_accepted_payment_is_broken_down(self, rupees: DenominationSet) -> None:
        settlement = settle(237, 500, denominations=rupees)

        assert settlement.validation.accepted
        assert settlement.change == Decimal("263")
        assert settlement.breakdown is not None
        assert settlement.breakdown.total_note_count == 5
        assert settlement.remainder == Decimal("0")

    def test_fractional_change_keeps_dropped_remainder(
        self, rupees: DenominationSet
    ) -> None:
        settlement = settle("100.50", "200", denominations=rupees)

        assert settlement.change == Decimal("99.50")
        assert settlement.breakdown is not None
        assert settlement.breakdown.amount == 99
        assert settlement.breakdown.total_note_count == 6
        assert settlement.remainder == Decimal("0.50")

    def test_exact_payment_has_no_breakdown(self, rupees: DenominationSet) -> None:
        settlement = settle(100, 100, denominations=rupees)

        assert settlement.validation.status is Status.EXACT
        assert settlement.change is None
        assert settlement.breakdown is None
        assert settlement.remainder is None

    def test_rejection_has_no_breakdown(self, rupees: DenominationSet) -> None:
        settlement = settle(None, "abc", denominations=rupees)

        assert settlement.validation.codes == (
            ReasonCode.INVALID_BILL_AMOUNT,
            ReasonCode.INVALID_CASH_AMOUNT,
        )
        assert settlement.breakdown is None

    def test_custom_denominations(self) -> None:
        settlement = settle(1, 41, denominations=DenominationSet((25, 10, 5, 1)))

        assert settlement.breakdown is not None
        assert [e.denomination for e in settlement.breakdown.entries] == [25, 10, 5]


class TestRenderSettlement:
    def test_accepted_payload(self, rupees: DenominationSet) -> None:
        payload = render_settlement(settle(237, 500, denominations=rupees))

        assert payload["status"] == "accepted"
        assert payload["field_errors"] == {}
        assert payload["summary"] == {
            "bill": "₹237.00",
            "cash": "₹500.00",
            "change": "₹263.00",
            "total_notes": 5,
            "remainder": "0.00",
        }
        assert payload["message"] == {
            "type": "success",
            "text": "Change calculated successfully! Return ₹263.00 to the customer.",
        }
        assert [row["label"] for row in payload["rows"]] == [
            "₹200 Note",
            "₹50 Note",
            "₹10 Note",
            "₹2 Coin",
            "₹1 Coin",
        ]
        assert payload["rows"][0] == {
            "denomination": 200,
            "count": 1,
            "subtotal": 200,
            "kind": "Note",
            "label": "₹200 Note",
            "subtotal_label": "₹200",
        }

    def test_fractional_change_summary(self, rupees: DenominationSet) -> None:
        payload = render_settlement(settle("100.50", 200, denominations=rupees))

        assert payload["summary"]["change"] == "₹99.50"
        assert payload["summary"]["remainder"] == "0.50"
        assert payload["summary"]["total_notes"] == 6

    def test_coin_threshold_and_symbol(self, rupees: DenominationSet) -> None:
        payload = render_settlement(
            settle(1, 61, denominations=rupees, currency_symbol="Rs "),
            currency_symbol="Rs ",
            coin_threshold=100,
        )

        assert [row["label"] for row in payload["rows"]] == ["Rs 50 Coin", "Rs 10 Coin"]

    def test_exact_payload(self, rupees: DenominationSet) -> None:
        payload = render_settlement(settle(100, 100, denominations=rupees))

        assert payload["status"] == "exact"
        assert payload["message"] == {
            "type": "success",
            "text": "Exact amount paid! No change to return.",
        }
        assert payload["rows"] == []
        assert payload["summary"] is None

    def test_field_errors_payload(self, rupees: DenominationSet) -> None:
        payload = render_settlement(settle(0, 0, denominations=rupees))

        assert payload["status"] == "rejected"
        assert payload["message"] is None
        assert payload["field_errors"] == {
            "bill_amount": "Please enter a valid bill amount greater than 0",
            "cash_given": "Please enter a valid cash amount greater than 0",
        }
        assert "bill amount" in payload["error"]

    def test_short_payment_payload_is_a_banner(self, rupees: DenominationSet) -> None:
        payload = render_settlement(settle(237, 200, denominations=rupees))

        assert payload["field_errors"] == {}
        assert payload["message"]["type"] == "error"
        assert payload["message"]["text"].endswith("₹237")


class TestSettleExactChange:
    @pytest.mark.parametrize(
        ("bill", "cash"),
        [
            ("100.50", "200"),
            ("0.000000000000000000000000001", "999999999999999"),
            ("0.01", "1000000000000000"),
            ("123456789.987654321987654321", "999999999999999.5"),
            ("999999999999998.999999999999999999", "999999999999999"),
            ("1", "2.0000000000000000000000000000001"),
        ],
    )
    def test_subtotals_match_floor_of_exact_difference(
        self, rupees: DenominationSet, bill: str, cash: str
    ) -> None:
        settlement = settle(bill, cash, denominations=rupees)

        expected = math.floor(Fraction(Decimal(cash)) - Fraction(Decimal(bill)))
        assert settlement.breakdown is not None
        assert settlement.breakdown.amount == expected
        assert sum(e.subtotal for e in settlement.breakdown.entries) == expected
        assert Fraction(settlement.change) == Fraction(Decimal(cash)) - Fraction(
            Decimal(bill)
        )

    def test_tiny_bill_against_large_cash_is_not_rounded_away(
        self, rupees: DenominationSet
    ) -> None:
        settlement = settle(
            Decimal("0.000000000000000000000000001"),
            Decimal("999999999999999"),
            denominations=rupees,
        )

        assert settlement.breakdown is not None
        assert settlement.breakdown.amount == 999999999999998
        assert settlement.remainder == Decimal("0.999999999999999999999999999")

    def test_amount_above_maximum_is_rejected(self, rupees: DenominationSet) -> None:
        settlement = settle(Decimal("0.01"), Decimal("1" + "0" * 27), denominations=rupees)

        assert settlement.validation.codes == (ReasonCode.INVALID_CASH_AMOUNT,)
        assert settlement.breakdown is None

    def test_large_payment_renders(self, rupees: DenominationSet) -> None:
        payload = render_settlement(
            settle("0.000000000000000000000000001", "999999999999999", denominations=rupees)
        )

        assert payload["status"] == "accepted"
        assert payload["summary"]["change"] == "₹999999999999999.00"
        assert payload["summary"]["remainder"] == "1.00"
