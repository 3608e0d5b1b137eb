"""taxes - Bracket math and tax-year rules.

Scope:
- Progressive (marginal) tax over bracket tables
- Reference tax year tables used when no rules are injected
- Year-specific rules loaded from tax-rules/{year}.yaml

Constraints:
- brackets.py is pure calculation - no I/O
- rules.py owns all file access and caching

Usage:
    from payplan.sdk.taxes import progressive_tax, load_tax_rules

    rules = load_tax_rules(2026)
    tax = progressive_tax(85000, rules.federal.tax_brackets)
"""

from .brackets import (
    progressive_tax,
    reference_rules,
    REFERENCE_TAX_YEAR,
)

from .schemas import (
    TaxBracket,
    JurisdictionRules,
    ContributionLimits,
    TaxYearRules,
)

from .rules import (
    load_tax_rules,
    available_years,
    default_year,
    validate_year,
    clear_cache,
    TaxRulesError,
    TaxRulesNotFoundError,
    YearOutOfRangeError,
)

__all__ = [
    # Brackets
    "progressive_tax",
    "reference_rules",
    "REFERENCE_TAX_YEAR",
    # Schemas
    "TaxBracket",
    "JurisdictionRules",
    "ContributionLimits",
    "TaxYearRules",
    # Rules loading
    "load_tax_rules",
    "available_years",
    "default_year",
    "validate_year",
    "clear_cache",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "YearOutOfRangeError",
]
