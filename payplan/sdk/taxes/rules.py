"""Tax-year rules loading.

Rules live in tax-rules/{year}.yaml. Files in the user config directory
(see payplan.sdk.config) take precedence over the ones bundled with the
package. Loaded rules are validated with pydantic and cached per year.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..config import get_bundled_tax_rules_dir, get_user_tax_rules_dir
from .schemas import TaxYearRules


logger = logging.getLogger(__name__)

MIN_YEAR = 2020
MAX_YEAR = 2050

_cache: Dict[int, TaxYearRules] = {}
_cache_lock = threading.Lock()


class TaxRulesError(Exception):
    """Raised when tax rules cannot be loaded or are invalid."""
    pass


class YearOutOfRangeError(TaxRulesError):
    """Raised when a requested year is outside MIN_YEAR-MAX_YEAR."""
    pass


class TaxRulesNotFoundError(TaxRulesError):
    """Raised when no rules file exists for a year."""
    pass


def get_tax_rules_dirs() -> list[Path]:
    """Get tax-rules directories in lookup order (user first, then bundled)."""
    return [get_user_tax_rules_dir(), get_bundled_tax_rules_dir()]


def validate_year(year) -> Tuple[bool, Optional[str]]:
    """Check that a year is an integer inside the supported range.

    Returns:
        Tuple of (valid, error_message)
    """
    if not isinstance(year, int) or isinstance(year, bool):
        return False, f"Year must be an integer, got {type(year).__name__}"
    if not MIN_YEAR <= year <= MAX_YEAR:
        return False, f"Year {year} is outside valid range ({MIN_YEAR}-{MAX_YEAR})"
    return True, None


def available_years() -> list[int]:
    """Get sorted list of years with a rules file in any tax-rules directory."""
    years = set()
    for rules_dir in get_tax_rules_dirs():
        if not rules_dir.is_dir():
            continue
        for path in rules_dir.glob("*.yaml"):
            if not path.stem.isdigit():
                continue
            year = int(path.stem)
            valid, message = validate_year(year)
            if not valid:
                logger.warning(f"Skipping {path}: {message}")
                continue
            years.add(year)
    return sorted(years)


def default_year() -> int:
    """Get the most recent year with rules available.

    Raises:
        TaxRulesNotFoundError: If no rules files exist
    """
    years = available_years()
    if not years:
        dirs = ", ".join(str(d) for d in get_tax_rules_dirs())
        raise TaxRulesNotFoundError(f"No tax rules files found in: {dirs}")
    return years[-1]


def find_tax_rules_file(year: int) -> Optional[Path]:
    """Find the rules file for a year, honoring directory precedence."""
    for rules_dir in get_tax_rules_dirs():
        candidate = rules_dir / f"{year}.yaml"
        if candidate.exists():
            return candidate
    return None


def load_tax_rules(year: int) -> TaxYearRules:
    """Load and validate tax rules for a year (cached).

    Args:
        year: Tax year (e.g., 2026)

    Returns:
        Validated TaxYearRules

    Raises:
        YearOutOfRangeError: If year is not an integer in range
        TaxRulesNotFoundError: If no rules file exists for the year
        TaxRulesError: If the file cannot be parsed or fails validation
    """
    valid, message = validate_year(year)
    if not valid:
        raise YearOutOfRangeError(message)

    with _cache_lock:
        if year in _cache:
            return _cache[year]

        path = find_tax_rules_file(year)
        if path is None:
            dirs = ", ".join(str(d) for d in get_tax_rules_dirs())
            raise TaxRulesNotFoundError(f"Tax rules file not found for year {year} in: {dirs}")

        rules = _parse_rules_file(path, year)
        logger.debug(f"Loaded tax rules for {year} from {path}")
        _cache[year] = rules
        return rules


def clear_cache() -> None:
    """Forget all cached rules (used after editing files and by tests)."""
    with _cache_lock:
        _cache.clear()


def _parse_rules_file(path: Path, year: int) -> TaxYearRules:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise TaxRulesError(f"Failed to read tax rules file {path}: {e}") from e

    if not isinstance(data, dict) or not data:
        raise TaxRulesError(f"Tax rules file is empty or invalid: {path}")

    data.setdefault("year", year)
    if data["year"] != year:
        raise TaxRulesError(f"{path} declares year {data['year']}, expected {year}")

    try:
        return TaxYearRules.model_validate(data)
    except ValidationError as e:
        raise TaxRulesError(f"Invalid tax rules in {path}:\n{e}") from e
