"""Configuration directory resolution for Pay Plan.

Config directory resolution:
1. PAY_PLAN_CONFIG_PATH environment variable (if set)
2. XDG_CONFIG_HOME/pay-plan/
3. ~/.config/pay-plan/

The config directory may hold a tax-rules/ folder whose YYYY.yaml files
override the rules bundled with the package.
"""

import os
from pathlib import Path


APP_NAME = "pay-plan"
CONFIG_ENV_VAR = "PAY_PLAN_CONFIG_PATH"
TAX_RULES_DIRNAME = "tax-rules"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAY_PLAN_CONFIG_PATH environment variable
    2. ~/.config/pay-plan/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory (may not exist)
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(xdg_config_home) / APP_NAME


def get_user_tax_rules_dir() -> Path:
    """Get the user tax-rules directory (config_dir/tax-rules)."""
    return get_config_dir() / TAX_RULES_DIRNAME


def get_bundled_tax_rules_dir() -> Path:
    """Get the tax-rules directory shipped inside the package."""
    return Path(__file__).parent.parent / "tax_rules"
