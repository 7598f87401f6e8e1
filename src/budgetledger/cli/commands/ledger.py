"""Ledger book commands."""

import click

from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from budgetledger.domain.ledger import LedgerBookService
from budgetledger.domain.ledger_line import CommittedReconciliationLine


@click.group()
def ledger_group():
    """Manage the ledger book."""
    pass


@ledger_group.command("track")
@click.argument("code", metavar="CODE")
@click.option("--account", required=True, help="Account the bucket's funds are kept in")
@click.option("--from", "effective_from", default="today", help="Date tracking starts")
@click.option("--opening-balance", default="0", help="Funds already set aside for the bucket")
@click.pass_context
def track_bucket(ctx, code: str, account: str, effective_from: str, opening_balance: str):
    """Track budget bucket CODE in the ledger book.

    Examples:
        budgetledger ledger track POWER --account Cheque
        budgetledger ledger track CAR --account Savings --opening-balance 350
    """
    when = parse_date_or_exit(ctx, effective_from, "start date")
    opening = parse_amount_or_exit(ctx, opening_balance, "opening balance")
    try:
        LedgerBookService(ctx.obj["db"]).track_bucket(code, account, when, opening)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Tracking '{code}' in '{account}' from {when}")


@ledger_group.command("move")
@click.argument("code", metavar="CODE")
@click.option("--account", required=True, help="Account the bucket's funds are now kept in")
@click.option("--from", "effective_from", default="today", help="Date of the move")
@click.pass_context
def move_bucket(ctx, code: str, account: str, effective_from: str):
    """Keep bucket CODE's funds in a different account."""
    when = parse_date_or_exit(ctx, effective_from, "move date")
    try:
        LedgerBookService(ctx.obj["db"]).move_bucket(code, account, when)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Moved '{code}' to '{account}' from {when}")


@ledger_group.command("retire")
@click.argument("code", metavar="CODE")
@click.option("--on", "retired_on", default="today", help="Date tracking stops")
@click.pass_context
def retire_bucket(ctx, code: str, retired_on: str):
    """Stop tracking bucket CODE in future reconciliations."""
    when = parse_date_or_exit(ctx, retired_on, "retirement date")
    try:
        LedgerBookService(ctx.obj["db"]).retire_bucket(code, when)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Retired '{code}' on {when}")


@ledger_group.command("show")
@click.option("--limit", default=3, show_default=True, help="Number of lines to show")
@click.pass_context
def show_ledger(ctx, limit: int):
    """Show the most recent reconciliation lines."""
    service = LedgerBookService(ctx.obj["db"])
    book = service.load_book()

    buckets = book.ledger_buckets
    if buckets:
        click.echo("\nTracked buckets:")
        for bucket in buckets:
            click.echo(f"  {bucket.bucket_code:12s} in {bucket.stored_in_account}")

    if not book.reconciliations:
        click.echo("\nNo reconciliations found.")
        return

    for line in book.reconciliations[:limit]:
        echo_line(line)


@ledger_group.command("validate")
@click.pass_context
def validate_ledger(ctx):
    """Check the stored ledger book for inconsistencies."""
    messages = LedgerBookService(ctx.obj["db"]).validate()
    if not messages:
        click.echo("Ledger book is valid.")
        return
    for message in messages:
        click.echo(f"  - {message}", err=True)
    ctx.exit(1)


def echo_line(line: CommittedReconciliationLine) -> None:
    """Print a reconciliation line."""
    click.echo(f"\nReconciliation {line.date}")
    if line.remarks:
        click.echo(f"  {line.remarks}")
    click.echo("-" * 60)
    for entry in line.entries:
        click.echo(
            f"{entry.bucket_code:12s} opening {entry.opening_balance:>10,.2f}"
            f"  net {entry.net_amount:>10,.2f}  balance {entry.balance:>10,.2f}"
        )
        for txn in entry.transactions:
            reference = f" [{txn.auto_match_reference}]" if txn.auto_match_reference else ""
            click.echo(f"    {txn.amount:>10,.2f}  {txn.narrative}{reference}")
    for adjustment in line.balance_adjustments:
        account = f" ({adjustment.account})" if adjustment.account is not None else ""
        click.echo(f"Adjustment   {adjustment.amount:>10,.2f}  {adjustment.narrative}{account}")
    click.echo("-" * 60)
    click.echo(f"Bank balance   {line.total_bank_balance:>12,.2f}")
    click.echo(f"Ledger balance {line.ledger_balance:>12,.2f}")
    for surplus in line.surplus_balances:
        click.echo(f"Surplus {str(surplus.account):14s} {surplus.balance:>12,.2f}")
    click.echo(f"Total surplus  {line.calculated_surplus:>12,.2f}")


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
