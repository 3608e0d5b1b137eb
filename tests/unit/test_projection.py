"""Tests for household projection and per-owner optimization."""

import pytest

from payplan.sdk.household import HouseholdConfig
from payplan.sdk.projection import (
    PaycheckTotals,
    default_hsa_target,
    job_descriptor,
    optimize_household,
    project_household,
    project_job,
)
from payplan.sdk.taxes import reference_rules


@pytest.fixture
def rules():
    return reference_rules()


def job_dict(name, owner="alex", **overrides):
    data = {
        "name": name,
        "owner": owner,
        "first_paycheck_date": "2026-01-02",
        "pay_frequency": "biweekly",
        "gross_per_paycheck": 2000,
        "contributions": {"traditional_pct": 25},
    }
    data.update(overrides)
    return data


@pytest.fixture
def two_job_household():
    """One owner, two jobs that are each under the deferral limit but not together."""
    return HouseholdConfig(tax_year=2026, jobs=[job_dict("Day Job"), job_dict("Night Job")])


class TestProjectJob:

    def test_paychecks_for_year(self, two_job_household, rules):
        projection = project_job(two_job_household.jobs[0], 2026, rules)

        assert projection.job_name == "Day Job"
        assert projection.owner == "alex"
        assert len(projection.paychecks) == 26
        assert projection.totals.paychecks == 26

    def test_totals(self, two_job_household, rules):
        projection = project_job(two_job_household.jobs[0], 2026, rules)

        assert projection.totals.gross == pytest.approx(52000)
        assert projection.totals.employee_traditional == pytest.approx(13000)

    def test_ytd_matches_totals(self, two_job_household, rules):
        projection = project_job(two_job_household.jobs[0], 2026, rules)

        assert projection.paychecks[-1].ytd_employee_401k == pytest.approx(projection.totals.employee_traditional)

    def test_single_job_within_limits(self, two_job_household, rules):
        projection = project_job(two_job_household.jobs[0], 2026, rules)

        assert projection.limits.within_limits is True


class TestProjectHousehold:

    def test_limits_checked_across_owner_jobs(self, two_job_household, rules):
        projection = project_household(two_job_household, rules)

        assert all(job.limits.within_limits for job in projection.jobs)
        assert projection.owners["alex"].limits.warnings == ["Employee 401(k) limit exceeded by $3000.00"]
        assert projection.within_limits is False

    def test_owner_summary(self, two_job_household, rules):
        summary = project_household(two_job_household, rules).owners["alex"]

        assert summary.jobs == ["Day Job", "Night Job"]
        assert summary.totals.paychecks == 52
        assert summary.totals.employee_traditional == pytest.approx(26000)

    def test_owners_checked_separately(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", owner="alex"), job_dict("Night Job", owner="sam")])

        projection = project_household(household, rules)

        assert set(projection.owners) == {"alex", "sam"}
        assert projection.within_limits is True

    def test_year_from_household(self, two_job_household, rules):
        assert project_household(two_job_household, rules).year == 2026

    def test_year_without_paychecks(self, two_job_household, rules):
        projection = project_household(two_job_household, rules, 2027)

        assert projection.year == 2027
        assert all(job.paychecks == [] for job in projection.jobs)
        assert projection.within_limits is True


class TestPaycheckTotals:

    def test_empty(self):
        totals = PaycheckTotals.from_paychecks([])

        assert totals.paychecks == 0
        assert totals.net_cash == 0


class TestOptimizeHousehold:

    def test_results_per_owner(self, rules):
        household = HouseholdConfig(jobs=[
            job_dict("Day Job", owner="alex"),
            job_dict("Contract", owner="sam"),
            job_dict("Night Job", owner="alex"),
        ])

        results = optimize_household(household, rules)

        assert list(results) == ["alex", "sam"]
        assert [r.job_name for r in results["alex"]] == ["Day Job", "Night Job"]

    def test_each_owner_gets_full_room(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", owner="alex"), job_dict("Contract", owner="sam")])

        results = optimize_household(household, rules)

        alex = results["alex"][0].contribution_input.traditional_pct
        sam = results["sam"][0].contribution_input.traditional_pct
        assert alex == sam == pytest.approx(44.23)

    def test_hsa_target_override(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", hsa_allowed=500)])

        [result] = optimize_household(household, rules, hsa_target=0)["alex"]

        assert result.contribution_input.hsa_pct == 0

    def test_self_coverage_uses_individual_limit(self, rules):
        household = HouseholdConfig(hsa_coverage="self", jobs=[job_dict("Day Job", hsa_allowed=500)])

        assert default_hsa_target(household, rules) == 4150
        [result] = optimize_household(household, rules)["alex"]
        # 4,150 / 26 = 159.62 per check of 2,000
        assert result.contribution_input.hsa_pct == pytest.approx(7.98)

    def test_family_coverage(self, two_job_household, rules):
        assert default_hsa_target(two_job_household, rules) == 8300


class TestJobDescriptor:

    def test_counts_paychecks_in_year(self, two_job_household):
        descriptor = job_descriptor(two_job_household.jobs[0], 2026)

        assert descriptor.paycheck_count == 26
        assert descriptor.gross == 2000

    def test_threshold_defaults_to_match_cap(self):
        household = HouseholdConfig(jobs=[job_dict("Day Job", employer_match_cap_pct=6)])

        assert job_descriptor(household.jobs[0], 2026).match_threshold_pct == 6


class TestFamilyHsa:

    @pytest.fixture
    def two_owner_household(self):
        def make(coverage, hsa_pct=0):
            return HouseholdConfig(hsa_coverage=coverage, jobs=[
                job_dict("Tech Corp", owner="alex", gross_per_paycheck=4000, hsa_allowed=400,
                         contributions={"hsa_pct": hsa_pct}),
                job_dict("Hospital", owner="sam", gross_per_paycheck=4000, hsa_allowed=400,
                         contributions={"hsa_pct": hsa_pct}),
            ])
        return make

    def test_optimizer_shares_family_room_across_owners(self, two_owner_household, rules):
        household = two_owner_household("family")

        results = optimize_household(household, rules)

        alex = results["alex"][0].contribution_input.hsa_pct
        sam = results["sam"][0].contribution_input.hsa_pct
        assert alex == pytest.approx(7.98)
        assert sam == 0
        assert (alex + sam) / 100 * 4000 * 26 <= rules.limits.hsa_family_limit

    def test_self_coverage_gives_each_owner_individual_room(self, two_owner_household, rules):
        results = optimize_household(two_owner_household("self"), rules)

        assert results["alex"][0].contribution_input.hsa_pct == pytest.approx(3.99)
        assert results["sam"][0].contribution_input.hsa_pct == pytest.approx(3.99)

    def test_projection_flags_household_overage(self, two_owner_household, rules):
        projection = project_household(two_owner_household("family", hsa_pct=7.98), rules)

        assert all(summary.limits.within_limits for summary in projection.owners.values())
        assert projection.household_limits.warnings == ["Household HSA family limit exceeded by $8298.40"]
        assert projection.within_limits is False

    def test_self_coverage_has_no_household_check(self, two_owner_household, rules):
        projection = project_household(two_owner_household("self", hsa_pct=7.98), rules)

        assert projection.household_limits.within_limits is True
        assert projection.within_limits is True

    def test_employer_hsa_reduces_room(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", hsa_allowed=500, employer_hsa_per_paycheck=100)])

        [result] = optimize_household(household, rules)["alex"]

        # 8,300 - 2,600 employer = 5,700 over 26 checks of 2,000
        assert result.contribution_input.hsa_pct == pytest.approx(10.96)


class TestStartingYtd:

    def test_seeds_paycheck_ytd(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", starting_ytd_traditional=12000)])

        [job] = project_household(household, rules).jobs

        assert job.paychecks[0].ytd_employee_401k == pytest.approx(12500)
        assert job.paychecks[-1].ytd_employee_401k == pytest.approx(25000)
        assert job.totals.employee_traditional == pytest.approx(13000)

    def test_counts_toward_limits(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", starting_ytd_traditional=12000)])

        projection = project_household(household, rules)

        assert projection.jobs[0].limits.warnings == ["Employee 401(k) limit exceeded by $2000.00"]
        assert projection.owners["alex"].limits.warnings == ["Employee 401(k) limit exceeded by $2000.00"]

    def test_starting_hsa_counts_for_household(self, rules):
        household = HouseholdConfig(jobs=[
            job_dict("Day Job", contributions={"hsa_pct": 15}, starting_ytd_hsa=800),
        ])

        projection = project_household(household, rules)

        # 300 * 26 = 7,800 projected + 800 prior
        assert projection.household_limits.warnings == ["Household HSA family limit exceeded by $300.00"]

    def test_optimizer_uses_remaining_room(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", starting_ytd_traditional=10000)])

        [result] = optimize_household(household, rules)["alex"]

        # 13,000 left over 26 checks of 2,000
        assert result.contribution_input.traditional_pct == pytest.approx(25)


class TestBonus:

    def test_bonus_is_extra_supplemental_check(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", bonus_amount=10000, bonus_date="2026-06-12")])

        [job] = project_household(household, rules).jobs
        bonus = job.paychecks[12]

        assert len(job.paychecks) == 27
        assert bonus.supplemental is True
        assert bonus.gross == 10000
        assert bonus.employee_traditional == pytest.approx(2500)
        assert bonus.employer_hsa == 0
        # 7,500 taxable at the flat supplemental rates
        assert bonus.federal_tax == pytest.approx(1650.00)
        assert bonus.state_tax == pytest.approx(767.25)

    def test_ytd_runs_through_bonus(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", bonus_amount=10000, bonus_date="2026-06-12")])

        [job] = project_household(household, rules).jobs

        assert job.paychecks[12].ytd_employee_401k == pytest.approx(12 * 500 + 2500)
        assert job.paychecks[-1].ytd_employee_401k == pytest.approx(15500)
        assert job.totals.gross == pytest.approx(62000)

    def test_dates_stay_in_order(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", bonus_amount=5000, bonus_date="2026-01-16")])

        [job] = project_household(household, rules).jobs
        dates = [p.date for p in job.paychecks]

        assert dates == sorted(dates)
        assert job.paychecks[1].supplemental is False
        assert job.paychecks[2].supplemental is True

    def test_bonus_outside_year_ignored(self, rules):
        household = HouseholdConfig(jobs=[job_dict("Day Job", bonus_amount=5000, bonus_date="2027-01-15")])

        [job] = project_household(household, rules).jobs

        assert len(job.paychecks) == 26
        assert not any(p.supplemental for p in job.paychecks)

    def test_bonus_can_push_over_limit(self, rules):
        household = HouseholdConfig(jobs=[
            job_dict("Day Job", contributions={"traditional_pct": 40}, bonus_amount=10000, bonus_date="2026-12-11"),
        ])

        projection = project_household(household, rules)

        # 800 * 26 + 4,000 bonus deferral = 24,800
        assert projection.owners["alex"].limits.warnings == ["Employee 401(k) limit exceeded by $1800.00"]


class TestJobsWithoutPaychecks:

    def test_descriptor_is_none(self):
        household = HouseholdConfig(jobs=[job_dict("Next Year", first_paycheck_date="2027-01-08")])

        assert job_descriptor(household.jobs[0], 2026) is None

    def test_skipped_by_optimizer(self, rules):
        household = HouseholdConfig(tax_year=2026, jobs=[
            job_dict("Day Job"),
            job_dict("Next Year", first_paycheck_date="2027-01-08"),
        ])

        results = optimize_household(household, rules)

        assert [r.job_name for r in results["alex"]] == ["Day Job"]
