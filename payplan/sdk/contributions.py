"""Per-paycheck contribution, match and withholding projection.

ContributionPlan turns a list of paycheck dates into one PaycheckResult per
date. Contributions are percentages of gross pay; employer match applies to
pretax + Roth only and is capped per paycheck as a percentage of gross.

Money amounts are rounded to the cent per paycheck, and YTD totals accumulate
the rounded amounts, so YTD always equals the starting amounts plus the sum of
the per-paycheck values.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .taxes.brackets import progressive_tax, reference_rules
from .taxes.schemas import JurisdictionRules, TaxYearRules


logger = logging.getLogger(__name__)


class ContributionInput(BaseModel):
    """Contribution elections for one job, each as a percentage of gross.

    The sum is not checked here; see payplan.sdk.household.validate_household.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    traditional_pct: float = Field(default=0, ge=0, le=100, description="Pretax 401(k) %")
    roth_pct: float = Field(default=0, ge=0, le=100, description="Roth 401(k) %")
    after_tax_pct: float = Field(default=0, ge=0, le=100, description="After-tax 401(k) %")
    hsa_pct: float = Field(default=0, ge=0, le=100, description="Employee HSA %")

    @property
    def total_pct(self) -> float:
        """Sum of all elections."""
        return self.traditional_pct + self.roth_pct + self.after_tax_pct + self.hsa_pct


class PaycheckResult(BaseModel):
    """Projected amounts for a single paycheck plus running YTD totals."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    date: date
    gross: float
    employee_traditional: float
    employee_roth: float
    employee_after_tax: float
    employee_hsa: float
    employer_match: float
    employer_hsa: float
    federal_tax: float
    state_tax: float
    net_cash: float = Field(..., description="Take-home; may be negative if elections exceed pay")
    ytd_employee_401k: float = Field(..., description="Traditional + Roth + after-tax through this check")
    ytd_hsa: float = Field(..., description="Employee + employer HSA through this check")
    ytd_match: float = Field(..., description="Employer match through this check")
    supplemental: bool = Field(default=False, description="Bonus check withheld at the supplemental rate")


def _cents(amount: float) -> float:
    return round(amount, 2)


class StartingYtd(BaseModel):
    """Contributions already made this year before the projected paychecks.

    Used to carry a mid-year job's prior contributions into the YTD fields
    and the limit checks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    traditional: float = Field(default=0, ge=0)
    roth: float = Field(default=0, ge=0)
    after_tax: float = Field(default=0, ge=0)
    hsa: float = Field(default=0, ge=0, description="Employee + employer HSA")
    match: float = Field(default=0, ge=0)

    @property
    def employee_401k(self) -> float:
        return _cents(self.traditional + self.roth + self.after_tax)

    def plus_paychecks(self, paychecks: Sequence[PaycheckResult]) -> "StartingYtd":
        """Starting amounts for whatever follows these paychecks."""
        return StartingYtd(
            traditional=_cents(self.traditional + sum(p.employee_traditional for p in paychecks)),
            roth=_cents(self.roth + sum(p.employee_roth for p in paychecks)),
            after_tax=_cents(self.after_tax + sum(p.employee_after_tax for p in paychecks)),
            hsa=_cents(self.hsa + sum(p.employee_hsa + p.employer_hsa for p in paychecks)),
            match=_cents(self.match + sum(p.employer_match for p in paychecks)),
        )

    @classmethod
    def combine(cls, items: Iterable["StartingYtd"]) -> "StartingYtd":
        totals = cls()
        for item in items:
            totals = cls(
                traditional=_cents(totals.traditional + item.traditional),
                roth=_cents(totals.roth + item.roth),
                after_tax=_cents(totals.after_tax + item.after_tax),
                hsa=_cents(totals.hsa + item.hsa),
                match=_cents(totals.match + item.match),
            )
        return totals


class ContributionPlan:
    """Project contributions and withholding for a job's paychecks.

    Args:
        gross_per_paycheck: Gross pay for each paycheck
        contribution_input: Employee elections
        employer_match_rate: Match per dollar contributed (0.5 = 50%)
        employer_match_cap_pct: Max matchable contribution as % of gross
        employer_hsa_per_paycheck: Employer HSA funding per paycheck
        rules: Tax-year rules (defaults to the reference year)
        starting_ytd: Amounts the YTD fields start from (defaults to zero)
        supplemental: Withhold at each jurisdiction's flat supplemental rate
            (bonus pay) instead of annualizing
    """

    def __init__(
        self,
        gross_per_paycheck: float,
        contribution_input: ContributionInput,
        employer_match_rate: float,
        employer_match_cap_pct: float,
        employer_hsa_per_paycheck: float = 0,
        rules: Optional[TaxYearRules] = None,
        starting_ytd: Optional[StartingYtd] = None,
        supplemental: bool = False,
    ):
        self.gross = gross_per_paycheck
        self.contribution_input = contribution_input
        self.employer_match_rate = employer_match_rate
        self.employer_match_cap_pct = employer_match_cap_pct
        self.employer_hsa = employer_hsa_per_paycheck
        self.rules = rules or reference_rules()
        self.starting_ytd = starting_ytd or StartingYtd()
        self.supplemental = supplemental

    def process_paychecks(self, dates: Iterable[date]) -> List[PaycheckResult]:
        """Compute one PaycheckResult per date, in input order.

        Accumulators are local to the call, so repeated calls with the same
        dates return identical results.
        """
        gross = self.gross
        elections = self.contribution_input

        traditional = _cents(elections.traditional_pct / 100 * gross)
        roth = _cents(elections.roth_pct / 100 * gross)
        after_tax = _cents(elections.after_tax_pct / 100 * gross)
        hsa = _cents(elections.hsa_pct / 100 * gross)
        employer_hsa = _cents(self.employer_hsa)

        matchable = min(traditional + roth, gross * self.employer_match_cap_pct / 100)
        employer_match = _cents(matchable * self.employer_match_rate)

        # Roth and after-tax come out of taxed pay; pretax and HSA do not
        taxable_wages = gross - traditional - hsa
        federal_tax = self.withholding(taxable_wages, self.rules.federal)
        state_tax = self.withholding(taxable_wages, self.rules.state)

        net_cash = _cents(gross - traditional - roth - after_tax - hsa - federal_tax - state_tax)

        ytd_401k = self.starting_ytd.employee_401k
        ytd_hsa = _cents(self.starting_ytd.hsa)
        ytd_match = _cents(self.starting_ytd.match)
        results = []
        for pay_date in dates:
            ytd_401k = _cents(ytd_401k + traditional + roth + after_tax)
            ytd_hsa = _cents(ytd_hsa + hsa + employer_hsa)
            ytd_match = _cents(ytd_match + employer_match)

            results.append(PaycheckResult(
                date=pay_date,
                gross=_cents(gross),
                employee_traditional=traditional,
                employee_roth=roth,
                employee_after_tax=after_tax,
                employee_hsa=hsa,
                employer_match=employer_match,
                employer_hsa=employer_hsa,
                federal_tax=federal_tax,
                state_tax=state_tax,
                net_cash=net_cash,
                ytd_employee_401k=ytd_401k,
                ytd_hsa=ytd_hsa,
                ytd_match=ytd_match,
                supplemental=self.supplemental,
            ))

        logger.debug(
            f"Processed {len(results)} paychecks: gross={gross:.2f} "
            f"fed={federal_tax:.2f} state={state_tax:.2f} net={net_cash:.2f}"
        )
        return results

    def withholding(self, taxable_wages: float, jurisdiction: JurisdictionRules) -> float:
        """Estimate per-paycheck withholding for one jurisdiction.

        Regular pay is annualized with rules.withholding_periods (26 for every
        frequency), reduced by the standard deduction, run through the
        brackets and de-annualized with the same period count. Supplemental
        pay uses the jurisdiction's flat supplemental rate when it has one.
        """
        if self.supplemental and jurisdiction.supplemental_rate is not None:
            return _cents(max(taxable_wages, 0) * jurisdiction.supplemental_rate)

        periods = self.rules.withholding_periods
        annualized = taxable_wages * periods
        annual_tax = progressive_tax(
            max(annualized - jurisdiction.standard_deduction, 0),
            jurisdiction.tax_brackets,
        )
        return _cents(annual_tax / periods)
