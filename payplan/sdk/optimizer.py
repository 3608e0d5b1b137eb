"""Greedy allocation of annual contribution room across simultaneous jobs.

Jobs are processed in the order given, sharing two budgets: HSA room
(hsa_target) and the employee deferral limit. Earlier jobs get first claim
on the room; nothing is revisited once a job is allocated. Reorder the jobs
to change priority.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .contributions import ContributionInput
from .taxes.brackets import reference_rules
from .taxes.schemas import ContributionLimits


logger = logging.getLogger(__name__)


class JobDescriptor(BaseModel):
    """Optimizer view of a job."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    gross: float = Field(..., gt=0, description="Gross pay per paycheck")
    paycheck_count: int = Field(..., gt=0, description="Paychecks remaining in the year")
    hsa_allowed: float = Field(default=0, ge=0, description="Max employee HSA per paycheck")
    match_threshold_pct: float = Field(
        default=0, ge=0, le=100, description="Contribution % needed for the full employer match"
    )
    max_traditional_pct: float = Field(default=100, ge=0, le=100)
    allow_roth: bool = True
    allow_after_tax: bool = False
    true_up: bool = False
    preferred_roth_pct: float = Field(default=0, ge=0, le=100)
    preferred_after_tax_pct: float = Field(default=0, ge=0, le=100)


class OptimizedJob(BaseModel):
    """Suggested elections for one job."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    job_name: str
    contribution_input: ContributionInput
    notes: List[str] = Field(default_factory=list)


class Optimizer:
    """First-come-first-served allocation of HSA and 401(k) room.

    Args:
        jobs: Job descriptors in priority order
        hsa_target: Total HSA dollars to place (defaults to the family limit)
        limits: Annual limits (defaults to the reference year)
        deferral_room: Employee deferral room to fill (defaults to the limit;
            pass less when contributions were already made this year)
    """

    def __init__(
        self,
        jobs: Sequence[JobDescriptor],
        hsa_target: Optional[float] = None,
        limits: Optional[ContributionLimits] = None,
        deferral_room: Optional[float] = None,
    ):
        self.jobs = list(jobs)
        self.limits = limits or reference_rules().limits
        self.hsa_target = self.limits.hsa_family_limit if hsa_target is None else hsa_target
        self.deferral_room = self.limits.employee_deferral_limit if deferral_room is None else deferral_room

    def optimize(self) -> List[OptimizedJob]:
        remaining_hsa = self.hsa_target
        remaining_401k = self.deferral_room

        results = []
        for job in self.jobs:
            count = job.paycheck_count

            # Spread what is left evenly over this job's checks, never more than the check itself
            hsa_per_check = max(min(remaining_hsa / count, job.hsa_allowed, job.gross), 0)
            remaining_hsa -= hsa_per_check * count

            # Traditional can only use pay the HSA election left over
            trad_cap = max(min(job.max_traditional_pct, 100 - hsa_per_check / job.gross * 100), 0)

            # Never go below the contribution that earns the full match
            trad_pct = min(job.match_threshold_pct, trad_cap)

            if remaining_401k > 0:
                trad_room = min(remaining_401k / (count * job.gross) * 100, trad_cap)
                trad_pct = max(trad_room, trad_pct)
                remaining_401k -= trad_pct / 100 * job.gross * count

            roth_pct = job.preferred_roth_pct if job.allow_roth else 0
            after_tax_pct = job.preferred_after_tax_pct if job.allow_after_tax else 0

            logger.debug(
                f"{job.name}: hsa/check={hsa_per_check:.2f} trad={trad_pct:.2f}% "
                f"remaining_hsa={remaining_hsa:.2f} remaining_401k={remaining_401k:.2f}"
            )

            results.append(OptimizedJob(
                job_name=job.name,
                contribution_input=ContributionInput(
                    traditional_pct=round(trad_pct, 2),
                    roth_pct=round(roth_pct, 2),
                    after_tax_pct=round(after_tax_pct, 2),
                    hsa_pct=round(hsa_per_check / job.gross * 100, 2),
                ),
                notes=[
                    f"Match threshold {job.match_threshold_pct:g}% applied",
                    "True-up allows safe front-loading" if job.true_up else "Per-paycheck match preserved",
                    "After-tax allowed" if job.allow_after_tax else "After-tax not allowed",
                ],
            ))

        return results
