"""Pay Plan - paycheck contribution projection and multi-job optimization."""

__version__ = "0.3.0"
