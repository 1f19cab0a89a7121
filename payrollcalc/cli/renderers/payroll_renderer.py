"""Rich renderer for payroll results.

Transforms SDK result models into formatted Rich tables.
"""

from decimal import Decimal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from payrollcalc.sdk.schemas import PayrollCalculationResult, PayrollRunResult


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def render_payroll_result(console: Console, result: PayrollCalculationResult) -> None:
    """Render one staff member's payslip as Rich tables.

    Args:
        console: Rich Console instance
        result: Output of calculate_payroll()
    """
    for warning in result.warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    table = Table(
        title=f"Payslip: {result.staff_member_id}",
        box=box.SIMPLE_HEAVY,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Item")
    table.add_column("Employee", justify="right")
    table.add_column("Employer", justify="right", style="dim")

    # Earnings
    if result.basic_pay:
        table.add_row("Basic Pay", _money(result.basic_pay), "")
    if result.transport_allowance:
        table.add_row("Transport Allowance", _money(result.transport_allowance), "")
    for name, amount in result.other_payments.items():
        table.add_row(name, _money(amount), "")
    table.add_row("[bold]Total gross[/bold]", f"[bold]{_money(result.total_gross)}[/bold]", "", end_section=True)

    # Statutory
    table.add_row("Pension", f"-{_money(result.employee_pension)}", _money(result.employer_pension))
    table.add_row("Maternity", f"-{_money(result.employee_maternity)}", _money(result.employer_maternity))
    table.add_row("RAMA", f"-{_money(result.employee_rama)}", _money(result.employer_rama))
    table.add_row("PAYE", f"-{_money(result.paye)}", "")
    table.add_row("Net before CBHI", _money(result.net_before_cbhi), "")
    table.add_row("CBHI", f"-{_money(result.cbhi)}", "", end_section=True)

    # Company deductions
    for deduction_id, amount in result.deductions.items():
        table.add_row(f"Deduction {deduction_id}", f"-{_money(amount)}", "")
    if result.deductions:
        table.add_row("Total deductions", f"-{_money(result.total_applied_deductions)}", "", end_section=True)

    table.add_row("[bold green]Net pay[/bold green]", f"[bold green]{_money(result.final_net_pay)}[/bold green]", "")

    console.print(table)


def render_payroll_run(console: Console, run: PayrollRunResult) -> None:
    """Render a company payroll run: one payslip per staff member, then totals."""
    for result in run.results:
        render_payroll_result(console, result)

    for error in run.errors:
        label = error.staff_member_id or f"record #{error.index + 1}"
        console.print(Panel(
            f"[red]{error.error}[/red]",
            title=f"Skipped {label}",
            border_style="red"
        ))

    if len(run.results) < 2:
        return

    totals = run.totals
    table = Table(title="Payroll totals", box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Column")
    table.add_column("Total", justify="right")
    table.add_row("Staff", str(totals.staff_count))
    table.add_row("Gross", _money(totals.total_gross))
    table.add_row("Pension (employee / employer)",
                  f"{_money(totals.employee_pension)} / {_money(totals.employer_pension)}")
    table.add_row("Maternity (employee / employer)",
                  f"{_money(totals.employee_maternity)} / {_money(totals.employer_maternity)}")
    table.add_row("RAMA (employee / employer)",
                  f"{_money(totals.employee_rama)} / {_money(totals.employer_rama)}")
    table.add_row("PAYE", _money(totals.paye))
    table.add_row("CBHI", _money(totals.cbhi))
    table.add_row("Deductions", _money(totals.total_applied_deductions))
    table.add_row("[bold]Net pay[/bold]", f"[bold]{_money(totals.final_net_pay)}[/bold]")
    console.print(table)
