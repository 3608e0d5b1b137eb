"""Household projection: schedule -> contribution plan -> limit check.

Each job is projected on its own schedule, with any bonus paid as an extra
supplemental check on its date. 401(k) limits are then checked per owner
across all of that owner's jobs, since they apply to a person rather than to
a single employer. With family HSA coverage, one family HSA limit is shared
by the whole household.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .contributions import ContributionPlan, PaycheckResult, StartingYtd
from .household import HouseholdConfig, JobConfig
from .limits import LimitChecker, LimitResult, check_household_hsa
from .optimizer import JobDescriptor, OptimizedJob, Optimizer
from .taxes.schemas import TaxYearRules


logger = logging.getLogger(__name__)


class PaycheckTotals(BaseModel):
    """Sums of per-paycheck amounts."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    paychecks: int = 0
    gross: float = 0
    employee_traditional: float = 0
    employee_roth: float = 0
    employee_after_tax: float = 0
    employee_hsa: float = 0
    employer_match: float = 0
    employer_hsa: float = 0
    federal_tax: float = 0
    state_tax: float = 0
    net_cash: float = 0

    @classmethod
    def from_paychecks(cls, paychecks: List[PaycheckResult]) -> "PaycheckTotals":
        amounts = {
            name: round(sum(getattr(p, name) for p in paychecks), 2)
            for name in cls.model_fields
            if name != "paychecks"
        }
        return cls(paychecks=len(paychecks), **amounts)


class JobProjection(BaseModel):
    """Projection for one job."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    job_name: str
    owner: str
    starting_ytd: StartingYtd = Field(default_factory=StartingYtd)
    paychecks: List[PaycheckResult]
    totals: PaycheckTotals = Field(..., description="Projected paychecks only, excluding starting_ytd")
    limits: LimitResult = Field(..., description="Limit check for this job alone")


class OwnerSummary(BaseModel):
    """Combined totals and limit check for one owner's jobs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    owner: str
    jobs: List[str]
    totals: PaycheckTotals
    limits: LimitResult


class HouseholdProjection(BaseModel):
    """Projection for every job in a household."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    jobs: List[JobProjection]
    owners: Dict[str, OwnerSummary]
    household_limits: LimitResult = Field(
        default_factory=lambda: LimitResult(within_limits=True),
        description="Limits shared by the whole household (family HSA coverage)",
    )

    @property
    def within_limits(self) -> bool:
        return self.household_limits.within_limits and all(
            summary.limits.within_limits for summary in self.owners.values()
        )


def _plan(job: JobConfig, rules: TaxYearRules, starting_ytd: StartingYtd, bonus: bool = False) -> ContributionPlan:
    return ContributionPlan(
        gross_per_paycheck=job.bonus_amount if bonus else job.gross,
        contribution_input=job.contributions,
        employer_match_rate=job.employer_match_rate,
        employer_match_cap_pct=job.employer_match_cap_pct,
        employer_hsa_per_paycheck=0 if bonus else job.employer_hsa_per_paycheck,
        rules=rules,
        starting_ytd=starting_ytd,
        supplemental=bonus,
    )


def project_job(job: JobConfig, year: int, rules: TaxYearRules) -> JobProjection:
    """Project one job's paychecks for a tax year.

    YTD fields start from the job's starting_ytd amounts. A bonus in the
    year is an extra check on its date, paid after any regular check on the
    same day, using the same elections and supplemental withholding.
    """
    dates = list(job.schedule().dates_for_year(year))
    starting_ytd = job.starting_ytd()
    bonus_date = job.bonus_date_in(year)

    if bonus_date is None:
        paychecks = _plan(job, rules, starting_ytd).process_paychecks(dates)
    else:
        paychecks = _plan(job, rules, starting_ytd).process_paychecks(d for d in dates if d <= bonus_date)
        seed = starting_ytd.plus_paychecks(paychecks)
        bonus = _plan(job, rules, seed, bonus=True).process_paychecks([bonus_date])
        seed = seed.plus_paychecks(bonus)
        paychecks += bonus
        paychecks += _plan(job, rules, seed).process_paychecks(d for d in dates if d > bonus_date)

    logger.debug(f"{job.name}: {len(paychecks)} paychecks in {year}")

    return JobProjection(
        job_name=job.name,
        owner=job.owner,
        starting_ytd=starting_ytd,
        paychecks=paychecks,
        totals=PaycheckTotals.from_paychecks(paychecks),
        limits=LimitChecker(paychecks, rules.limits, starting_ytd).validate(),
    )


def project_household(
    household: HouseholdConfig,
    rules: TaxYearRules,
    year: Optional[int] = None,
) -> HouseholdProjection:
    """Project all jobs, check limits per owner, and check the family HSA limit.

    Args:
        household: Loaded household
        rules: Rules for the tax year being projected
        year: Tax year (defaults to household.resolve_year())
    """
    year = household.resolve_year(year)
    projections = [project_job(job, year, rules) for job in household.jobs]

    owners = {}
    for owner in household.owners():
        owned = [p for p in projections if p.owner == owner]
        paychecks = [check for p in owned for check in p.paychecks]
        owners[owner] = OwnerSummary(
            owner=owner,
            jobs=[p.job_name for p in owned],
            totals=PaycheckTotals.from_paychecks(paychecks),
            limits=LimitChecker(
                paychecks,
                rules.limits,
                StartingYtd.combine(p.starting_ytd for p in owned),
            ).validate(),
        )

    if household.hsa_coverage == "family":
        household_limits = check_household_hsa(
            [check for p in projections for check in p.paychecks],
            rules.limits,
            starting_hsa=sum(p.starting_ytd.hsa for p in projections),
        )
    else:
        household_limits = LimitResult(within_limits=True)

    return HouseholdProjection(year=year, jobs=projections, owners=owners, household_limits=household_limits)


def job_descriptor(job: JobConfig, year: int) -> Optional[JobDescriptor]:
    """Build the optimizer's view of a job, counting its paychecks in year.

    Returns:
        JobDescriptor, or None if the job has no paychecks in year
    """
    paycheck_count = sum(1 for _ in job.schedule().dates_for_year(year))
    if paycheck_count == 0:
        return None
    return JobDescriptor(
        name=job.name,
        gross=job.gross,
        paycheck_count=paycheck_count,
        hsa_allowed=job.hsa_allowed,
        match_threshold_pct=job.effective_match_threshold_pct,
        max_traditional_pct=job.max_traditional_pct,
        allow_roth=job.allow_roth,
        allow_after_tax=job.allow_after_tax,
        true_up=job.true_up,
        preferred_roth_pct=job.preferred_roth_pct,
        preferred_after_tax_pct=job.preferred_after_tax_pct,
    )


def default_hsa_target(household: HouseholdConfig, rules: TaxYearRules) -> float:
    """HSA limit matching the household's coverage (falls back to family)."""
    if household.hsa_coverage == "self" and rules.limits.hsa_individual_limit is not None:
        return rules.limits.hsa_individual_limit
    return rules.limits.hsa_family_limit


def _committed_hsa(jobs: List[JobConfig], year: int) -> float:
    """HSA dollars already spoken for: starting amounts plus employer funding."""
    total = 0.0
    for job in jobs:
        paycheck_count = sum(1 for _ in job.schedule().dates_for_year(year))
        total += job.starting_ytd_hsa + job.employer_hsa_per_paycheck * paycheck_count
    return total


def _suggested_hsa(results: List[OptimizedJob], descriptors: List[JobDescriptor]) -> float:
    return sum(
        result.contribution_input.hsa_pct / 100 * descriptor.gross * descriptor.paycheck_count
        for result, descriptor in zip(results, descriptors)
    )


def optimize_household(
    household: HouseholdConfig,
    rules: TaxYearRules,
    year: Optional[int] = None,
    hsa_target: Optional[float] = None,
) -> Dict[str, List[OptimizedJob]]:
    """Run the optimizer for each owner over that owner's jobs, in file order.

    401(k) room is per owner, less that owner's starting contributions. With
    family coverage the HSA target is one household budget: owners earlier
    in the file claim it first. With self coverage each owner gets the full
    target. Employer HSA funding and starting HSA amounts are taken out of
    the target before employee HSA is allocated. Jobs with no paychecks in
    the year are skipped.

    Returns:
        Dict of owner -> OptimizedJob list
    """
    year = household.resolve_year(year)
    if hsa_target is None:
        hsa_target = default_hsa_target(household, rules)

    shared_hsa = household.hsa_coverage == "family"
    remaining_hsa = max(hsa_target - _committed_hsa(household.jobs, year), 0)

    results = {}
    for owner in household.owners():
        jobs = household.jobs_for(owner)
        descriptors = []
        for job in jobs:
            descriptor = job_descriptor(job, year)
            if descriptor is None:
                logger.warning(f"{job.name}: no paychecks in {year}, skipped")
                continue
            descriptors.append(descriptor)

        starting_ytd = StartingYtd.combine(job.starting_ytd() for job in jobs)
        if shared_hsa:
            owner_hsa = remaining_hsa
        else:
            owner_hsa = max(hsa_target - _committed_hsa(jobs, year), 0)

        optimizer = Optimizer(
            descriptors,
            hsa_target=owner_hsa,
            limits=rules.limits,
            deferral_room=max(
                rules.limits.employee_deferral_limit - starting_ytd.traditional - starting_ytd.roth, 0
            ),
        )
        results[owner] = optimizer.optimize()

        if shared_hsa:
            remaining_hsa = max(remaining_hsa - _suggested_hsa(results[owner], descriptors), 0)

    return results
