"""Pay Plan CLI - Command-line interface for paycheck contribution projections."""

import json
import logging
import os

import click
from rich.console import Console

from payplan import __version__
from payplan.sdk import (
    HouseholdFileError,
    PaycheckSchedule,
    ScheduleConfigError,
    TaxRulesError,
    load_household,
    load_tax_rules,
    optimize_household,
    project_household,
    validate_household,
)

from .rules_commands import rules as rules_group
from .renderers.projection_renderer import render_household_projection, render_optimization


logging.basicConfig(
    level=getattr(logging, os.environ.get("LOG_LEVEL", "WARNING").upper(), logging.WARNING),
    format="%(levelname)s %(name)s: %(message)s",
)


@click.group()
@click.version_option(version=__version__, prog_name="pay-plan")
def cli():
    """Pay Plan - paycheck contribution projection tools.

    Projects pretax, Roth, after-tax and HSA contributions, employer match
    and withholding for every paycheck in a tax year, checks statutory
    limits, and suggests elections across multiple jobs.

    Tax rules are loaded from (in order):

    \b
    1. $PAY_PLAN_CONFIG_PATH/tax-rules/YYYY.yaml
    2. ~/.config/pay-plan/tax-rules/YYYY.yaml (XDG default)
    3. Rules bundled with the package

    Set LOG_LEVEL=DEBUG for calculation details.
    """
    pass


cli.add_command(rules_group)


def _load_validated_household(path, year):
    """Load a household file and stop with every validation error."""
    try:
        household = load_household(path)
    except HouseholdFileError as e:
        raise click.ClickException(str(e))

    validation = validate_household(household, year)
    for warning in validation.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)
    if not validation.valid:
        error_str = "\n  ! ".join(validation.errors)
        raise click.ClickException(f"Household has validation errors:\n\n  ! {error_str}")

    return household


def _load_rules(year):
    try:
        return load_tax_rules(year)
    except TaxRulesError as e:
        raise click.ClickException(str(e))


@cli.command("schedule")
@click.argument("first_date")
@click.option("--frequency", "-f", help="weekly, biweekly, semimonthly or monthly")
@click.option("--count", "paycheck_count", type=int, help="Maximum number of paychecks")
@click.option("--year", type=int, help="Tax year (default: year of FIRST_DATE)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def schedule(first_date, frequency, paycheck_count, year, output_format):
    """List paycheck dates starting at FIRST_DATE (YYYY-MM-DD).

    \b
    Examples:
      pay-plan schedule 2026-01-05 --frequency biweekly
      pay-plan schedule 2026-01-02 -f weekly --count 10
    """
    try:
        paycheck_schedule = PaycheckSchedule(first_date, frequency=frequency, paycheck_count=paycheck_count)
    except ScheduleConfigError as e:
        raise click.ClickException(str(e))

    dates = [d.isoformat() for d in paycheck_schedule.dates_for_year(year)]

    if output_format == "json":
        click.echo(json.dumps({"dates": dates, "count": len(dates)}, indent=2))
        return

    for d in dates:
        click.echo(d)
    click.echo(f"\n{len(dates)} paycheck(s)")


@cli.command("project")
@click.argument("household_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, help="Tax year (default: household tax_year)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--paychecks/--no-paychecks", default=True, help="Show per-paycheck tables (text only)")
def project(household_file, year, output_format, paychecks):
    """Project every paycheck for the jobs in HOUSEHOLD_FILE.

    Exits with status 1 if any owner exceeds a statutory limit.
    """
    household = _load_validated_household(household_file, year)
    year = household.resolve_year(year)
    tax_rules = _load_rules(year)

    projection = project_household(household, tax_rules, year)

    if output_format == "json":
        data = projection.model_dump(mode="json")
        data["within_limits"] = projection.within_limits
        click.echo(json.dumps(data, indent=2))
    else:
        render_household_projection(Console(), projection, show_paychecks=paychecks)

    if not projection.within_limits:
        raise SystemExit(1)


@cli.command("optimize")
@click.argument("household_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, help="Tax year (default: household tax_year)")
@click.option("--hsa-target", type=click.FloatRange(min=0),
              help="HSA dollars to place, shared by the household under family coverage "
                   "(default: limit for household hsa_coverage)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def optimize(household_file, year, hsa_target, output_format):
    """Suggest elections that use the year's contribution room.

    Jobs are allocated in file order per owner: earlier jobs claim HSA
    and 401(k) room first. Reorder jobs in HOUSEHOLD_FILE to change priority.
    """
    household = _load_validated_household(household_file, year)
    year = household.resolve_year(year)
    tax_rules = _load_rules(year)

    results = optimize_household(household, tax_rules, year, hsa_target=hsa_target)

    if output_format == "json":
        data = {
            "year": year,
            "owners": {
                owner: [job.model_dump(mode="json") for job in jobs]
                for owner, jobs in results.items()
            },
        }
        click.echo(json.dumps(data, indent=2))
        return

    render_optimization(Console(), year, results)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
