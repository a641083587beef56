"""Tests for amount parsing and name-or-ID resolution."""

import pytest
from decimal import Decimal

from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.resolver import resolve_account, resolve_category


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("123.45", Decimal("123.45")),
            ("$1,234.56", Decimal("1234.56")),
            ("¥1,000", Decimal("1000")),
            (" 7 ", Decimal("7")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "abc", "0", "-5", "nan"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_amount(value)


class TestResolvers:
    """Tests for account and category resolution."""

    def test_resolve_account_by_name_or_id(self, account_service, sample_accounts):
        checking = sample_accounts["Checking"]
        assert resolve_account(account_service, "Checking") == checking
        assert resolve_account(account_service, str(checking)) == checking
        assert resolve_account(account_service, checking) == checking

    def test_resolve_account_missing(self, account_service, sample_accounts):
        with pytest.raises(NotFoundError, match="'Brokerage'"):
            resolve_account(account_service, "Brokerage")
        with pytest.raises(NotFoundError):
            resolve_account(account_service, "999")

    def test_resolve_category(self, category_service, sample_categories):
        assert resolve_category(category_service, "Salary") == sample_categories["Salary"]
        with pytest.raises(NotFoundError):
            resolve_category(category_service, "Bonus")
