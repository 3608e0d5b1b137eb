"""Progressive bracket math and the reference tax year's tables.

The reference tables are the compiled-in default used when a caller does not
inject rules loaded from tax-rules/{year}.yaml. They match the bundled
2026.yaml file.
"""

from typing import Iterable

from .schemas import ContributionLimits, JurisdictionRules, TaxBracket, TaxYearRules


REFERENCE_TAX_YEAR = 2026

# Format: (upper_bound, rate); None marks the open top bracket
FEDERAL_BRACKETS = [
    (23200, 0.10),
    (94300, 0.12),
    (201050, 0.22),
    (383900, 0.24),
    (487450, 0.32),
    (731200, 0.35),
    (None, 0.37),
]

STATE_BRACKETS = [
    (20659, 0.01),
    (48435, 0.02),
    (76215, 0.04),
    (105387, 0.06),
    (133667, 0.08),
    (679015, 0.093),
    (None, 0.103),
]

FEDERAL_STANDARD_DEDUCTION = 30700
STATE_STANDARD_DEDUCTION = 10404
STATE_NAME = "CA"

# Flat withholding rates for bonus pay
FEDERAL_SUPPLEMENTAL_RATE = 0.22
STATE_SUPPLEMENTAL_RATE = 0.1023

EMPLOYEE_DEFERRAL_LIMIT = 23000
ANNUAL_ADDITIONS_LIMIT = 66000
HSA_FAMILY_LIMIT = 8300
HSA_INDIVIDUAL_LIMIT = 4150
CATCH_UP_CONTRIBUTION = 7500


def progressive_tax(amount: float, brackets: Iterable[TaxBracket]) -> float:
    """Calculate tax on an amount using marginal brackets.

    Args:
        amount: Taxable amount, already reduced by any deduction (must be >= 0)
        brackets: Brackets in ascending order; the last one is unbounded

    Returns:
        Total tax across all brackets the amount reaches
    """
    tax = 0.0
    remaining = amount
    lower_bound = 0.0

    for bracket in brackets:
        upper_bound = bracket.upper_bound
        span = max(upper_bound - lower_bound, 0)
        taxed = min(remaining, span)
        tax += taxed * bracket.rate
        remaining -= taxed
        lower_bound = upper_bound
        if remaining <= 0:
            break

    return tax


def _build_brackets(table: list) -> list[TaxBracket]:
    brackets = []
    previous = 0
    for upper_bound, rate in table:
        if upper_bound is None:
            brackets.append(TaxBracket(over=previous, rate=rate))
        else:
            brackets.append(TaxBracket(up_to=upper_bound, rate=rate))
            previous = upper_bound
    return brackets


def reference_rules() -> TaxYearRules:
    """Build TaxYearRules for the reference tax year from the tables above."""
    return TaxYearRules(
        year=REFERENCE_TAX_YEAR,
        federal=JurisdictionRules(
            name="federal",
            standard_deduction=FEDERAL_STANDARD_DEDUCTION,
            tax_brackets=_build_brackets(FEDERAL_BRACKETS),
            supplemental_rate=FEDERAL_SUPPLEMENTAL_RATE,
        ),
        state=JurisdictionRules(
            name=STATE_NAME,
            standard_deduction=STATE_STANDARD_DEDUCTION,
            tax_brackets=_build_brackets(STATE_BRACKETS),
            supplemental_rate=STATE_SUPPLEMENTAL_RATE,
        ),
        limits=ContributionLimits(
            employee_deferral_limit=EMPLOYEE_DEFERRAL_LIMIT,
            total_annual_additions_limit=ANNUAL_ADDITIONS_LIMIT,
            hsa_family_limit=HSA_FAMILY_LIMIT,
            hsa_individual_limit=HSA_INDIVIDUAL_LIMIT,
            catch_up_contribution=CATCH_UP_CONTRIBUTION,
        ),
    )
