"""Rich renderers for projections, optimizer output and tax rules.

Transforms SDK models into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from payplan.sdk import HouseholdProjection, JobProjection, LimitResult, TaxYearRules


def render_household_projection(console: Console, projection: HouseholdProjection, show_paychecks: bool = True) -> None:
    """Render every job, then per-owner totals and limit status.

    Args:
        console: Rich Console instance
        projection: Output of project_household()
        show_paychecks: Include the per-paycheck table for each job
    """
    for job in projection.jobs:
        if show_paychecks:
            _render_paycheck_table(console, job)
        _render_limits(console, f"{job.job_name} limits", job.limits)

    for summary in projection.owners.values():
        _render_owner_totals(console, projection.year, summary)
        _render_limits(console, f"{summary.owner} limits (all jobs)", summary.limits)

    _render_limits(console, "Household limits", projection.household_limits)


def render_optimization(console: Console, year: int, results: dict) -> None:
    """Render optimizer suggestions grouped by owner.

    Args:
        console: Rich Console instance
        year: Tax year optimized
        results: Output of optimize_household() (owner -> OptimizedJob list)
    """
    for owner, jobs in results.items():
        table = Table(title=f"Suggested Elections: {owner} ({year})", box=box.ROUNDED)
        table.add_column("Job", style="bold", no_wrap=True)
        table.add_column("Traditional", justify="right")
        table.add_column("Roth", justify="right")
        table.add_column("After-tax", justify="right")
        table.add_column("HSA", justify="right")
        table.add_column("Notes")

        for job in jobs:
            elections = job.contribution_input
            table.add_row(
                job.job_name,
                _pct(elections.traditional_pct),
                _pct(elections.roth_pct),
                _pct(elections.after_tax_pct),
                _pct(elections.hsa_pct),
                "\n".join(job.notes),
            )

        console.print(table)


def render_rules(console: Console, rules: TaxYearRules) -> None:
    """Render brackets, deductions and limits for a tax year."""
    for jurisdiction in (rules.federal, rules.state):
        table = Table(
            title=f"{rules.year} {jurisdiction.name} brackets "
                  f"(standard deduction {_fmt(jurisdiction.standard_deduction)}, "
                  f"bonus rate {_rate(jurisdiction.supplemental_rate)})",
            box=box.SIMPLE,
        )
        table.add_column("Up to", justify="right")
        table.add_column("Rate", justify="right")
        for bracket in jurisdiction.tax_brackets:
            upper = _fmt(bracket.up_to) if bracket.up_to is not None else "and above"
            table.add_row(upper, _pct(bracket.rate * 100))
        console.print(table)

    limits = rules.limits
    table = Table(title=f"{rules.year} limits", box=box.SIMPLE, show_header=False)
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")
    table.add_row("Employee deferral", _fmt(limits.employee_deferral_limit))
    table.add_row("Annual additions", _fmt(limits.total_annual_additions_limit))
    table.add_row("HSA family", _fmt(limits.hsa_family_limit))
    table.add_row("HSA individual", _fmt(limits.hsa_individual_limit))
    table.add_row("Catch-up", _fmt(limits.catch_up_contribution))
    table.add_row("Withholding periods", str(rules.withholding_periods))
    console.print(table)


def _render_paycheck_table(console: Console, job: JobProjection) -> None:
    table = Table(title=f"{job.job_name} ({job.owner})", box=box.ROUNDED)
    table.add_column("Date")
    table.add_column("Gross", justify="right")
    table.add_column("Trad", justify="right")
    table.add_column("Roth", justify="right")
    table.add_column("After-tax", justify="right")
    table.add_column("HSA", justify="right")
    table.add_column("Match", justify="right")
    table.add_column("Fed", justify="right")
    table.add_column("State", justify="right")
    table.add_column("Net", justify="right", style="green")
    table.add_column("YTD 401(k)", justify="right", style="dim")

    for check in job.paychecks:
        table.add_row(
            check.date.isoformat() + (" (bonus)" if check.supplemental else ""),
            _fmt(check.gross),
            _fmt(check.employee_traditional),
            _fmt(check.employee_roth),
            _fmt(check.employee_after_tax),
            _fmt(check.employee_hsa),
            _fmt(check.employer_match),
            _fmt(check.federal_tax),
            _fmt(check.state_tax),
            _fmt(check.net_cash),
            _fmt(check.ytd_employee_401k),
        )

    console.print(table)


def _render_owner_totals(console, year, summary) -> None:
    totals = summary.totals
    table = Table(title=f"{summary.owner} totals ({year})", box=box.ROUNDED, show_header=False)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Amount", justify="right", min_width=12)

    table.add_row("Jobs", ", ".join(summary.jobs))
    table.add_row("Paychecks", str(totals.paychecks))
    table.add_row("Gross Pay", _fmt(totals.gross))
    table.add_row("  Traditional 401(k)", _fmt(totals.employee_traditional))
    table.add_row("  Roth 401(k)", _fmt(totals.employee_roth))
    table.add_row("  After-tax 401(k)", _fmt(totals.employee_after_tax))
    table.add_row("  HSA", _fmt(totals.employee_hsa))
    table.add_row("Employer Match", _fmt(totals.employer_match))
    table.add_row("Employer HSA", _fmt(totals.employer_hsa))
    table.add_row("Federal Withholding", _fmt(totals.federal_tax))
    table.add_row("State Withholding", _fmt(totals.state_tax))
    table.add_row("[bold green]NET CASH[/bold green]", f"[bold green]{_fmt(totals.net_cash)}[/bold green]")

    console.print(table)


def _render_limits(console: Console, title: str, result: LimitResult) -> None:
    if result.within_limits:
        console.print(f"[green]{title}: within limits[/green]")
        return
    console.print(Panel(
        "\n".join(f"[yellow]{w}[/yellow]" for w in result.warnings),
        title=title,
        border_style="yellow",
    ))


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"


def _pct(value: float) -> str:
    return f"{value:g}%"


def _rate(rate: float | None) -> str:
    if rate is None:
        return "-"
    return _pct(rate * 100)
