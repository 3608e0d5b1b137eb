"""Pay Plan SDK - Core functionality for paycheck contribution projections."""

from .config import (
    get_config_dir,
    get_user_tax_rules_dir,
    get_bundled_tax_rules_dir,
)

from .taxes import (
    progressive_tax,
    reference_rules,
    load_tax_rules,
    available_years,
    default_year,
    TaxYearRules,
    TaxRulesError,
    TaxRulesNotFoundError,
    YearOutOfRangeError,
)

from .schedule import (
    PaycheckSchedule,
    PaycheckDates,
    ScheduleConfigError,
    FREQUENCY_DAYS,
)

from .contributions import (
    ContributionInput,
    ContributionPlan,
    PaycheckResult,
    StartingYtd,
)

from .limits import (
    LimitChecker,
    LimitResult,
    check_household_hsa,
)

from .optimizer import (
    JobDescriptor,
    OptimizedJob,
    Optimizer,
)

from .household import (
    HouseholdConfig,
    HouseholdFileError,
    HouseholdValidationResult,
    JobConfig,
    load_household,
    validate_household,
)

from .projection import (
    HouseholdProjection,
    JobProjection,
    OwnerSummary,
    PaycheckTotals,
    project_job,
    project_household,
    job_descriptor,
    optimize_household,
    default_hsa_target,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_user_tax_rules_dir",
    "get_bundled_tax_rules_dir",
    # Taxes
    "progressive_tax",
    "reference_rules",
    "load_tax_rules",
    "available_years",
    "default_year",
    "TaxYearRules",
    "TaxRulesError",
    "TaxRulesNotFoundError",
    "YearOutOfRangeError",
    # Schedule
    "PaycheckSchedule",
    "PaycheckDates",
    "ScheduleConfigError",
    "FREQUENCY_DAYS",
    # Contributions
    "ContributionInput",
    "ContributionPlan",
    "PaycheckResult",
    "StartingYtd",
    # Limits
    "LimitChecker",
    "LimitResult",
    "check_household_hsa",
    # Optimizer
    "JobDescriptor",
    "OptimizedJob",
    "Optimizer",
    # Household
    "HouseholdConfig",
    "HouseholdFileError",
    "HouseholdValidationResult",
    "JobConfig",
    "load_household",
    "validate_household",
    # Projection
    "HouseholdProjection",
    "JobProjection",
    "OwnerSummary",
    "PaycheckTotals",
    "project_job",
    "project_household",
    "job_descriptor",
    "optimize_household",
    "default_hsa_target",
]
