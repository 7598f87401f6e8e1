"""Monthly reconciliation command."""

import click

from budgetledger.cli.commands.ledger import echo_line
from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.cli.parsing import parse_balances_or_exit, parse_date_or_exit
from budgetledger.domain.reconcile import ReconciliationService
from budgetledger.domain.tasks import TaskPriority, ToDoTask, TransferTask


@click.command("reconcile")
@click.option("--date", "reconciliation_date", required=True, help="Reconciliation date (YYYY-MM-DD)")
@click.option(
    "--balance",
    "balances",
    multiple=True,
    required=True,
    help="Current bank balance as ACCOUNT=AMOUNT (repeat for each account)",
)
@click.option("--remarks", default="", help="Remarks stored with the new line")
@click.option("--dry-run", is_flag=True, help="Build and validate without saving")
@click.pass_context
def reconcile(ctx, reconciliation_date: str, balances: tuple[str, ...], remarks: str, dry_run: bool):
    """Add a new monthly reconciliation line to the ledger book.

    Examples:
        budgetledger reconcile --date 2024-02-15 --balance Cheque=2050.10 --balance Savings=1200
        budgetledger reconcile --date 2024-02-15 --balance Cheque=2050.10 --dry-run
    """
    when = parse_date_or_exit(ctx, reconciliation_date, "reconciliation date")
    bank_balances = parse_balances_or_exit(ctx, balances)

    try:
        result = ReconciliationService(ctx.obj["db"]).reconcile(
            when, bank_balances, remarks=remarks, save=not dry_run
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if result.messages:
        click.echo("Error: Reconciliation is invalid and was not saved:", err=True)
        for message in result.messages:
            click.echo(f"  - {message}", err=True)
        ctx.exit(1)

    echo_line(result.line if result.saved else result.draft.commit())

    if result.tasks:
        click.echo(f"\nTasks ({len(result.tasks)}):")
        for task in result.tasks:
            click.echo(f"  {format_task(task)}")

    if dry_run:
        click.echo("\nDry run: nothing was saved.")
    else:
        click.echo(f"\nSaved reconciliation dated {when}.")


def format_task(task: ToDoTask) -> str:
    """One-line rendering of a task."""
    marker = "!" if task.priority == TaskPriority.HIGH else "-"
    text = f"{marker} {task.description}"
    if isinstance(task, TransferTask):
        text += f" [{task.source_account} -> {task.destination_account}: {task.amount:,.2f}"
        if task.reference:
            text += f", ref {task.reference}"
        text += "]"
    return text


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile)
