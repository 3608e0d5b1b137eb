"""Household files: the jobs to project and optimize.

A household file is YAML:

    name: Smith Family
    tax_year: 2026
    hsa_coverage: family
    jobs:
      - name: Tech Corp
        owner: alex
        first_paycheck_date: 2026-01-15
        pay_frequency: biweekly
        base_salary: 150000
        contributions:
          traditional_pct: 10
          roth_pct: 5
          hsa_pct: 2
        employer_match_rate: 0.5
        employer_match_cap_pct: 6
        employer_hsa_per_paycheck: 50
        hsa_allowed: 150
        allow_after_tax: true
        true_up: true
        bonus_amount: 20000
        bonus_date: 2026-12-15
        starting_ytd_traditional: 4000

Loading only checks shape and types. Cross-field checks (contribution sums,
empty schedules) are done by validate_household, which reports problems as
data so every issue can be shown at once.
"""

from collections import Counter
from datetime import date
from pathlib import Path
from typing import List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .contributions import ContributionInput, StartingYtd
from .schedule import PaycheckSchedule, ScheduleConfigError, normalize_frequency


# Paychecks per year by frequency, used to turn a salary into gross per check
PAY_PERIODS = {
    "weekly": 52,
    "biweekly": 26,
    "semimonthly": 24,
    "monthly": 12,
}


class HouseholdFileError(Exception):
    """Raised when a household file cannot be read or parsed."""
    pass


class JobConfig(BaseModel):
    """One job as described in a household file."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    owner: str = Field(default="self", description="Person holding the job; limits apply per owner")
    first_paycheck_date: date
    pay_frequency: Optional[str] = Field(default=None, description="weekly, biweekly, semimonthly, monthly")
    paycheck_count: Optional[int] = Field(default=None, gt=0)
    gross_per_paycheck: Optional[float] = Field(default=None, gt=0)
    base_salary: Optional[float] = Field(default=None, gt=0, description="Annual salary")
    contributions: ContributionInput = Field(default_factory=ContributionInput)
    employer_match_rate: float = Field(default=0, ge=0, description="0.5 = 50 cents per dollar")
    employer_match_cap_pct: float = Field(default=0, ge=0, le=100)
    employer_hsa_per_paycheck: float = Field(default=0, ge=0)
    hsa_allowed: float = Field(default=0, ge=0, description="Max employee HSA per paycheck")
    match_threshold_pct: Optional[float] = Field(default=None, ge=0, le=100)
    max_traditional_pct: float = Field(default=100, ge=0, le=100)
    allow_roth: bool = True
    allow_after_tax: bool = False
    true_up: bool = False
    preferred_roth_pct: float = Field(default=0, ge=0, le=100)
    preferred_after_tax_pct: float = Field(default=0, ge=0, le=100)
    bonus_amount: float = Field(default=0, ge=0, description="One-time bonus gross")
    bonus_date: Optional[date] = None
    starting_ytd_traditional: float = Field(default=0, ge=0, description="Pretax 401(k) already contributed this year")
    starting_ytd_roth: float = Field(default=0, ge=0)
    starting_ytd_after_tax: float = Field(default=0, ge=0)
    starting_ytd_hsa: float = Field(default=0, ge=0, description="Employee + employer HSA already contributed")
    starting_ytd_match: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_pay(self) -> "JobConfig":
        if self.pay_frequency is None and self.paycheck_count is None:
            raise ValueError("pay_frequency or paycheck_count required")
        if self.pay_frequency is not None:
            try:
                self.pay_frequency = normalize_frequency(self.pay_frequency)
            except ScheduleConfigError as e:
                raise ValueError(str(e)) from e
        if self.gross_per_paycheck is None:
            if self.base_salary is None:
                raise ValueError("gross_per_paycheck or base_salary required")
            if self.pay_frequency is None:
                raise ValueError("base_salary requires pay_frequency")
        if self.bonus_date is not None and self.bonus_amount <= 0:
            raise ValueError("bonus_date requires a positive bonus_amount")
        if self.bonus_amount > 0 and self.bonus_date is None:
            raise ValueError("bonus_amount requires bonus_date")
        return self

    @property
    def gross(self) -> float:
        """Gross pay per paycheck."""
        if self.gross_per_paycheck is not None:
            return self.gross_per_paycheck
        return round(self.base_salary / PAY_PERIODS[self.pay_frequency], 2)

    @property
    def effective_match_threshold_pct(self) -> float:
        """Contribution % that earns the full match (defaults to the match cap)."""
        if self.match_threshold_pct is not None:
            return self.match_threshold_pct
        return self.employer_match_cap_pct

    def schedule(self) -> PaycheckSchedule:
        return PaycheckSchedule(
            self.first_paycheck_date,
            frequency=self.pay_frequency,
            paycheck_count=self.paycheck_count,
        )

    def starting_ytd(self) -> StartingYtd:
        """Contributions made before the first projected paycheck."""
        return StartingYtd(
            traditional=self.starting_ytd_traditional,
            roth=self.starting_ytd_roth,
            after_tax=self.starting_ytd_after_tax,
            hsa=self.starting_ytd_hsa,
            match=self.starting_ytd_match,
        )

    def bonus_date_in(self, year: int) -> Optional[date]:
        """Bonus date if a bonus is paid in year, else None."""
        if self.bonus_amount > 0 and self.bonus_date is not None and self.bonus_date.year == year:
            return self.bonus_date
        return None


class HouseholdConfig(BaseModel):
    """A set of jobs projected together."""

    model_config = ConfigDict(extra="forbid")

    name: str = "household"
    tax_year: Optional[int] = None
    hsa_coverage: Literal["family", "self"] = "family"
    jobs: List[JobConfig] = Field(..., min_length=1)

    def owners(self) -> List[str]:
        """Distinct owners in order of first appearance."""
        return list(dict.fromkeys(job.owner for job in self.jobs))

    def jobs_for(self, owner: str) -> List[JobConfig]:
        return [job for job in self.jobs if job.owner == owner]

    def resolve_year(self, year: Optional[int] = None) -> int:
        """Pick the tax year: explicit argument, then file, then first job's date."""
        if year is not None:
            return year
        if self.tax_year is not None:
            return self.tax_year
        return self.jobs[0].first_paycheck_date.year


class HouseholdValidationResult:
    """Result of household validation."""

    def __init__(self, errors: list = None, warnings: list = None):
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def valid(self) -> bool:
        """True if there are no errors (warnings are allowed)."""
        return not self.errors

    def __repr__(self) -> str:
        return f"HouseholdValidationResult(errors={self.errors!r}, warnings={self.warnings!r})"


def load_household(path: Union[str, Path]) -> HouseholdConfig:
    """Load a household YAML file.

    Raises:
        HouseholdFileError: If the file is missing, not YAML, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise HouseholdFileError(f"Household file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise HouseholdFileError(f"Failed to read household file {path}: {e}") from e

    if not isinstance(data, dict):
        raise HouseholdFileError(f"Household file is empty or not a mapping: {path}")

    try:
        return HouseholdConfig.model_validate(data)
    except ValidationError as e:
        raise HouseholdFileError(f"Invalid household file {path}:\n{e}") from e


def validate_household(household: HouseholdConfig, year: Optional[int] = None) -> HouseholdValidationResult:
    """Check cross-field rules the calculation core does not enforce.

    Errors:
        - contribution percentages summing over 100
        - no paychecks falling in the tax year
        - duplicate job names
    Warnings:
        - Roth or after-tax elections on a job that does not allow them
        - bonus dated outside the tax year (it is left out of the projection)
    """
    year = household.resolve_year(year)
    errors = []
    warnings = []

    duplicates = [name for name, n in Counter(job.name for job in household.jobs).items() if n > 1]
    for name in duplicates:
        errors.append(f"Duplicate job name: {name}")

    for job in household.jobs:
        total = job.contributions.total_pct
        if total > 100:
            errors.append(f"{job.name}: contribution percentages total {total:g}% (max 100%)")

        if not any(True for _ in job.schedule().dates_for_year(year)):
            errors.append(
                f"{job.name}: no paychecks in {year} "
                f"(first paycheck {job.first_paycheck_date.isoformat()})"
            )

        if job.contributions.roth_pct > 0 and not job.allow_roth:
            warnings.append(f"{job.name}: Roth elected but not allowed by plan")
        if job.contributions.after_tax_pct > 0 and not job.allow_after_tax:
            warnings.append(f"{job.name}: after-tax elected but not allowed by plan")
        if job.bonus_date is not None and job.bonus_date_in(year) is None:
            warnings.append(
                f"{job.name}: bonus date {job.bonus_date.isoformat()} is outside {year}; bonus not projected"
            )

    return HouseholdValidationResult(errors=errors, warnings=warnings)
