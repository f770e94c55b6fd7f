"""Tests for the balance, money/date helpers and the list presenter."""

import pytest
from datetime import date
from decimal import Decimal

from registro_contable.ledger import (
    compute_balance,
    format_amount,
    format_long_date,
    format_money,
    format_short_date,
    parse_amount,
    present_entries,
    present_entry,
    sort_for_display,
)
from registro_contable.models import Category, PaymentMethod, TransactionRecord

from tests.conftest import make_record


class TestBalance:
    """Tests for compute_balance."""

    def test_empty_balance_is_zero(self):
        assert compute_balance([]) == Decimal("0")

    def test_income_expense_support(self):
        """Test 100 income - 40 expense + 20 support = 80.00."""
        records = [
            make_record(Category.INCOME, "100"),
            make_record(Category.EXPENSE, "40"),
            make_record(Category.SUPPORT, "20"),
        ]
        balance = compute_balance(records)
        assert balance == Decimal("80")
        assert format_money(balance) == "$80.00"

    def test_balance_matches_signed_sum(self):
        records = [
            make_record(Category.INCOME, "10.10"),
            make_record(Category.EXPENSE, "0.35"),
            make_record(Category.EXPENSE, "3"),
            make_record(Category.SUPPORT, "1.25"),
        ]
        income_and_support = Decimal("10.10") + Decimal("1.25")
        expenses = Decimal("0.35") + Decimal("3")
        assert compute_balance(records) == income_and_support - expenses

    def test_balance_ignores_order(self):
        records = [
            make_record(Category.INCOME, "7"),
            make_record(Category.EXPENSE, "2.5"),
            make_record(Category.SUPPORT, "1"),
        ]
        assert compute_balance(records) == compute_balance(list(reversed(records)))

    def test_balance_is_repeatable(self):
        records = [make_record(Category.INCOME, "5"), make_record(Category.EXPENSE, "8")]
        assert compute_balance(records) == compute_balance(records) == Decimal("-3")

    def test_invalid_amount_is_skipped(self):
        """Test that a non-numeric stored amount contributes zero."""
        broken = TransactionRecord.model_construct(
            id="broken",
            description="Dato corrupto",
            amount="abc",
            category=Category.INCOME,
            counterparty_name="ACME",
            entry_date=date(2024, 1, 1),
            payment_method=PaymentMethod.CASH,
            created_at=0,
        )
        records = [make_record(Category.INCOME, "50"), broken]
        assert compute_balance(records) == Decimal("50")

    def test_non_finite_amount_is_skipped(self):
        broken = TransactionRecord.model_construct(
            id="nan",
            description="NaN",
            amount=Decimal("NaN"),
            category=Category.EXPENSE,
            counterparty_name="ACME",
            entry_date=date(2024, 1, 1),
            payment_method=PaymentMethod.CASH,
            created_at=0,
        )
        assert compute_balance([broken]) == Decimal("0")


class TestMoney:
    """Tests for amount parsing and formatting."""

    @pytest.mark.parametrize("text,expected", [
        ("50", Decimal("50")),
        (" 12.5 ", Decimal("12.5")),
        ("-3", Decimal("-3")),
        ("0", Decimal("0")),
    ])
    def test_parse_amount_numbers(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1,000", "NaN", "inf", None, True])
    def test_parse_amount_rejects(self, text):
        assert parse_amount(text) is None

    def test_format_amount_two_decimals(self):
        assert format_amount(Decimal("50.5")) == "50.50"
        assert format_amount(Decimal("0.005")) == "0.01"

    def test_format_beyond_default_precision(self):
        """Test that rounding to cents works past 28 significant digits."""
        assert format_amount(Decimal("1E+30")) == "1" + "0" * 30 + ".00"
        assert format_amount(Decimal("9" * 29 + ".995")) == "1" + "0" * 29 + ".00"
        assert format_money(Decimal("-1E+30")) == "-$1" + "0" * 30 + ".00"

    def test_format_money_negative(self):
        assert format_money(Decimal("-12.5")) == "-$12.50"


class TestDates:
    """Tests for date formatting."""

    def test_long_date(self):
        assert format_long_date(date(2024, 1, 3)) == "3 de enero de 2024"
        assert format_long_date(date(2023, 12, 25)) == "25 de diciembre de 2023"

    def test_short_date(self):
        assert format_short_date(date(2024, 1, 3)) == "03/01/2024"


class TestPresenter:
    """Tests for the list rows."""

    def test_most_recent_first(self):
        older = make_record(record_id="a", created_at=1000)
        newer = make_record(record_id="b", created_at=2000)
        assert [r.id for r in sort_for_display([older, newer])] == ["b", "a"]

    def test_same_timestamp_ordered_by_id(self):
        records = [
            make_record(record_id="c", created_at=1000),
            make_record(record_id="a", created_at=1000),
            make_record(record_id="b", created_at=5000),
        ]
        assert [r.id for r in sort_for_display(records)] == ["b", "a", "c"]

    def test_income_row(self):
        entry = present_entry(make_record(
            Category.INCOME,
            "100",
            counterparty_name="ACME",
            entry_date=date(2024, 1, 1),
            payment_method=PaymentMethod.TRANSFER,
            record_id="r1",
        ))
        assert entry.amount_text == "+ $100.00"
        assert entry.is_positive is True
        assert entry.counterparty_text == "Empresa/Patrón: ACME"
        assert entry.date_text == "01/01/2024"
        assert entry.payment_method_text == "Método: Transferencia"
        assert entry.can_generate_receipt is False

    def test_expense_row(self):
        entry = present_entry(make_record(
            Category.EXPENSE, "12.5", counterparty_name="Office Depot", record_id="r2",
        ))
        assert entry.amount_text == "- $12.50"
        assert entry.is_positive is False
        assert entry.counterparty_text == "Negocio: Office Depot"

    def test_support_row_offers_receipt(self):
        entry = present_entry(make_record(
            Category.SUPPORT, "20", counterparty_name="Juan", record_id="r3",
        ))
        assert entry.counterparty_text == "Compañero(a): Juan"
        assert entry.can_generate_receipt is True

    def test_huge_amount_row(self):
        entry = present_entry(make_record(Category.EXPENSE, "1E+30", record_id="r4"))
        assert entry.amount_text == "- $1" + "0" * 30 + ".00"

    def test_present_entries_sorted(self):
        entries = present_entries([
            make_record(record_id="old", created_at=1),
            make_record(record_id="new", created_at=2),
        ])
        assert [e.id for e in entries] == ["new", "old"]
