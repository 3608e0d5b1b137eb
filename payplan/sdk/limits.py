"""Statutory limit checks over projected paychecks.

Breaches are reported as warnings in the result, never raised: exceeding a
limit is a representable outcome the user needs to see.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .contributions import PaycheckResult, StartingYtd
from .taxes.brackets import reference_rules
from .taxes.schemas import ContributionLimits


logger = logging.getLogger(__name__)


class LimitResult(BaseModel):
    """Outcome of a limit check."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    within_limits: bool
    warnings: List[str] = Field(default_factory=list, description="One entry per breached limit")


def _result(checks: list) -> LimitResult:
    warnings = []
    for label, total, limit in checks:
        if total > limit:
            warnings.append(f"{label} exceeded by ${total - limit:.2f}")

    for warning in warnings:
        logger.info(warning)

    return LimitResult(within_limits=not warnings, warnings=warnings)


class LimitChecker:
    """Compare aggregate contributions against annual limits.

    Args:
        paychecks: Projected paychecks (any order, any number of jobs)
        limits: Annual limits (defaults to the reference year)
        starting_ytd: Contributions made before the projected paychecks
    """

    def __init__(
        self,
        paychecks: Sequence[PaycheckResult],
        limits: Optional[ContributionLimits] = None,
        starting_ytd: Optional[StartingYtd] = None,
    ):
        self.paychecks = list(paychecks)
        self.limits = limits or reference_rules().limits
        self.starting_ytd = starting_ytd or StartingYtd()

    def validate(self) -> LimitResult:
        start = self.starting_ytd

        # After-tax counts toward annual additions only, not the deferral limit
        employee_total = start.traditional + start.roth + sum(
            p.employee_traditional + p.employee_roth for p in self.paychecks
        )
        hsa_total = start.hsa + sum(p.employee_hsa + p.employer_hsa for p in self.paychecks)
        additions_total = start.employee_401k + start.match + sum(
            p.employee_traditional + p.employee_roth + p.employee_after_tax + p.employer_match
            for p in self.paychecks
        )

        return _result([
            ("Employee 401(k) limit", employee_total, self.limits.employee_deferral_limit),
            ("HSA family limit", hsa_total, self.limits.hsa_family_limit),
            ("Annual additions limit", additions_total, self.limits.total_annual_additions_limit),
        ])


def check_household_hsa(
    paychecks: Sequence[PaycheckResult],
    limits: Optional[ContributionLimits] = None,
    starting_hsa: float = 0,
) -> LimitResult:
    """Check every HSA dollar in a family-coverage household against one family limit."""
    limits = limits or reference_rules().limits
    hsa_total = starting_hsa + sum(p.employee_hsa + p.employer_hsa for p in paychecks)
    return _result([("Household HSA family limit", hsa_total, limits.hsa_family_limit)])
