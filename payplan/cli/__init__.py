"""Pay Plan command-line interface."""
