"""Tests for annual limit checks (LimitChecker.validate)."""

import logging
from datetime import date

import pytest

from payplan.sdk.contributions import PaycheckResult, StartingYtd
from payplan.sdk.limits import LimitChecker, LimitResult, check_household_hsa
from payplan.sdk.taxes import ContributionLimits


def paycheck(**amounts):
    """A PaycheckResult with zeros for every amount not given."""
    fields = {
        "date": date(2026, 12, 31),
        "gross": 0,
        "employee_traditional": 0,
        "employee_roth": 0,
        "employee_after_tax": 0,
        "employee_hsa": 0,
        "employer_match": 0,
        "employer_hsa": 0,
        "federal_tax": 0,
        "state_tax": 0,
        "net_cash": 0,
        "ytd_employee_401k": 0,
        "ytd_hsa": 0,
        "ytd_match": 0,
    }
    fields.update(amounts)
    return PaycheckResult(**fields)


class TestLimitChecker:

    def test_deferral_and_hsa_breaches(self):
        checks = [paycheck(
            employee_traditional=20000,
            employee_roth=5000,
            employee_after_tax=2000,
            employee_hsa=8000,
            employer_hsa=500,
            employer_match=10000,
        )]

        result = LimitChecker(checks).validate()

        assert result.within_limits is False
        assert result.warnings == [
            "Employee 401(k) limit exceeded by $2000.00",
            "HSA family limit exceeded by $200.00",
        ]

    def test_annual_additions_breach(self):
        checks = [paycheck(employee_after_tax=50000, employer_match=20000)]

        result = LimitChecker(checks).validate()

        assert result.warnings == ["Annual additions limit exceeded by $4000.00"]

    def test_after_tax_excluded_from_deferral_limit(self):
        checks = [paycheck(employee_traditional=20000, employee_after_tax=10000)]

        assert LimitChecker(checks).validate().within_limits is True

    def test_totals_span_paychecks(self):
        checks = [paycheck(employee_traditional=1000) for _ in range(24)]

        result = LimitChecker(checks).validate()

        assert result.warnings == ["Employee 401(k) limit exceeded by $1000.00"]

    def test_exactly_at_limit_is_within(self):
        checks = [paycheck(employee_traditional=23000, employee_hsa=8300)]

        assert LimitChecker(checks).validate().within_limits is True

    def test_empty_paychecks_within_limits(self):
        result = LimitChecker([]).validate()

        assert result == LimitResult(within_limits=True, warnings=[])

    def test_injected_limits(self):
        limits = ContributionLimits(
            employee_deferral_limit=1000,
            total_annual_additions_limit=5000,
            hsa_family_limit=500,
        )
        checks = [paycheck(employee_roth=1500, employee_hsa=400, employer_hsa=200)]

        result = LimitChecker(checks, limits).validate()

        assert result.warnings == [
            "Employee 401(k) limit exceeded by $500.00",
            "HSA family limit exceeded by $100.00",
        ]

    def test_within_limits_iff_no_warnings(self):
        for checks in ([], [paycheck(employee_roth=30000)]):
            result = LimitChecker(checks).validate()
            assert result.within_limits == (not result.warnings)

    def test_breaches_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="payplan.sdk.limits"):
            LimitChecker([paycheck(employee_hsa=9000)]).validate()

        assert "HSA family limit exceeded by $700.00" in caplog.text

    @pytest.mark.parametrize("field", ["employee_traditional", "employee_roth"])
    def test_both_deferral_types_count(self, field):
        result = LimitChecker([paycheck(**{field: 23000.01})]).validate()

        assert result.warnings == ["Employee 401(k) limit exceeded by $0.01"]


class TestStartingYtd:

    def test_prior_contributions_count(self):
        checks = [paycheck(employee_traditional=15000)]

        result = LimitChecker(checks, starting_ytd=StartingYtd(traditional=6000, roth=3000)).validate()

        assert result.warnings == ["Employee 401(k) limit exceeded by $1000.00"]

    def test_prior_hsa_counts(self):
        result = LimitChecker([paycheck(employee_hsa=8000)], starting_ytd=StartingYtd(hsa=500)).validate()

        assert result.warnings == ["HSA family limit exceeded by $200.00"]

    def test_prior_after_tax_and_match_count_toward_additions(self):
        checks = [paycheck(employee_after_tax=40000)]

        result = LimitChecker(checks, starting_ytd=StartingYtd(after_tax=20000, match=7000)).validate()

        assert result.warnings == ["Annual additions limit exceeded by $1000.00"]


class TestHouseholdHsa:

    def test_spouses_share_family_limit(self):
        checks = [paycheck(employee_hsa=5000), paycheck(employee_hsa=4000, employer_hsa=300)]

        result = check_household_hsa(checks)

        assert result.within_limits is False
        assert result.warnings == ["Household HSA family limit exceeded by $1000.00"]

    def test_within_family_limit(self):
        checks = [paycheck(employee_hsa=4000), paycheck(employee_hsa=4300)]

        assert check_household_hsa(checks).within_limits is True

    def test_starting_amount_counts(self):
        result = check_household_hsa([paycheck(employee_hsa=8000)], starting_hsa=400)

        assert result.warnings == ["Household HSA family limit exceeded by $100.00"]
