"""Tax rules CLI commands.

Shows the tax-year rules (brackets, deductions, limits) the projection uses.
"""

import json

import click
from rich.console import Console

from payplan.sdk import (
    available_years,
    default_year,
    load_tax_rules,
    get_user_tax_rules_dir,
    TaxRulesError,
)
from .renderers.projection_renderer import render_rules


@click.group("rules")
def rules():
    """Show tax-year rules.

    Rules are read from tax-rules/YYYY.yaml. A file in the config
    directory's tax-rules/ folder overrides the bundled one.
    """
    pass


@rules.command("years")
def rules_years():
    """List years with rules available."""
    years = available_years()
    if not years:
        click.echo("No tax rules found.")
        click.echo(f"Add files to: {get_user_tax_rules_dir()}")
        return

    latest = years[-1]
    for year in years:
        marker = " (default)" if year == latest else ""
        click.echo(f"{year}{marker}")


@rules.command("show")
@click.argument("year", required=False, type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def rules_show(year, output_format):
    """Show rules for YEAR (default: most recent available)."""
    try:
        if year is None:
            year = default_year()
        tax_rules = load_tax_rules(year)
    except TaxRulesError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(tax_rules.model_dump(mode="json"), indent=2))
        return

    render_rules(Console(), tax_rules)
