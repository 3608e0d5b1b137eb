"""Pydantic schemas for tax-year rules.

These schemas validate the tax-rules/*.yaml files and provide typed access
to bracket tables, standard deductions and contribution limits.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    up_to: Optional[float] = Field(default=None, gt=0, description="Upper bound (None if 'over' bracket)")
    over: Optional[float] = Field(default=None, ge=0, description="Lower bound for top bracket")
    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")

    @property
    def upper_bound(self) -> float:
        """Upper bound of the bracket; infinity for the open top bracket."""
        return self.up_to if self.up_to is not None else math.inf


class JurisdictionRules(BaseModel):
    """Standard deduction and brackets for one taxing jurisdiction."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Jurisdiction label (e.g., 'federal', 'CA')")
    standard_deduction: float = Field(..., ge=0)
    tax_brackets: list[TaxBracket] = Field(..., min_length=1)
    supplemental_rate: Optional[float] = Field(
        default=None, ge=0, le=1, description="Flat withholding rate for bonus pay"
    )

    @model_validator(mode="after")
    def check_brackets(self) -> "JurisdictionRules":
        """Brackets ascend, rates never decrease, and the last is unbounded."""
        errors = []
        bounds = [b.upper_bound for b in self.tax_brackets]
        rates = [b.rate for b in self.tax_brackets]

        if any(later <= earlier for earlier, later in zip(bounds, bounds[1:])):
            errors.append(f"{self.name}: bracket upper bounds must be strictly ascending")
        if any(later < earlier for earlier, later in zip(rates, rates[1:])):
            errors.append(f"{self.name}: bracket rates must be non-decreasing")
        if not math.isinf(bounds[-1]):
            errors.append(f"{self.name}: last bracket must be unbounded (use 'over')")

        if errors:
            raise ValueError("; ".join(errors))
        return self


class ContributionLimits(BaseModel):
    """Annual statutory contribution limits."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_deferral_limit: float = Field(..., gt=0, description="Pre-tax + Roth employee limit")
    total_annual_additions_limit: float = Field(
        ..., gt=0, description="Employee + after-tax + employer match limit"
    )
    hsa_family_limit: float = Field(..., gt=0, description="HSA limit for family coverage")
    hsa_individual_limit: Optional[float] = Field(default=None, gt=0)
    catch_up_contribution: Optional[float] = Field(default=None, gt=0)


class TaxYearRules(BaseModel):
    """Complete rules for one tax year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., description="Tax year the rules apply to")
    federal: JurisdictionRules
    state: JurisdictionRules
    limits: ContributionLimits
    withholding_periods: int = Field(
        default=26,
        gt=0,
        description="Paychecks per year used to annualize withholding, regardless of pay frequency",
    )
