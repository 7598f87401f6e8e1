"""Statement transaction commands."""

import click

from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from budgetledger.domain.statement import StatementService


@click.group()
def statement_group():
    """Record bank statement transactions."""
    pass


@statement_group.command("add")
@click.option("--account", required=True, help="Account name")
@click.option("--date", "txn_date", required=True, help="Transaction date (YYYY-MM-DD or 'today')")
@click.option("--amount", required=True, help="Amount, debits negative (e.g. -120.00)")
@click.option("--bucket", help="Budget bucket code")
@click.option("--description", help="Transaction description")
@click.option("--type", "transaction_type", help="Bank transaction type")
@click.option("--reference", "references", multiple=True, help="Reference field (up to three)")
@click.pass_context
def add_statement_transaction(
    ctx,
    account: str,
    txn_date: str,
    amount: str,
    bucket: str | None,
    description: str | None,
    transaction_type: str | None,
    references: tuple[str, ...],
):
    """Add a statement transaction manually.

    Examples:
        budgetledger statement add --account Cheque --date 2024-01-15 --amount -120 --bucket POWER
        budgetledger statement add --account Savings --date 2024-01-16 --amount 55 --bucket HAIR --reference AB12345
    """
    if len(references) > 3:
        click.echo("Error: At most three references can be given", err=True)
        ctx.exit(1)

    when = parse_date_or_exit(ctx, txn_date)
    value = parse_amount_or_exit(ctx, amount)
    refs = list(references) + [None] * (3 - len(references))

    try:
        txn = StatementService(ctx.obj["db"]).add_transaction(
            account_name=account,
            date=when,
            amount=value,
            bucket_code=bucket,
            description=description,
            transaction_type=transaction_type,
            reference1=refs[0],
            reference2=refs[1],
            reference3=refs[2],
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added statement transaction {txn.id}")
    click.echo(f"  Account: {account}")
    click.echo(f"  Date: {when}")
    click.echo(f"  Amount: {value:,.2f}")
    if bucket:
        click.echo(f"  Bucket: {bucket}")


@statement_group.command("list")
@click.option("--start-date", help="Inclusive start date")
@click.option("--end-date", help="Exclusive end date")
@click.pass_context
def list_statement_transactions(ctx, start_date: str | None, end_date: str | None):
    """List statement transactions."""
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    transactions = StatementService(ctx.obj["db"]).list_transactions(start, end)
    if not transactions:
        click.echo("No statement transactions found.")
        return

    for txn in transactions:
        refs = " ".join(r for r in txn.references if r)
        click.echo(
            f"{txn.date} | {str(txn.account):12s} | {txn.amount:>10,.2f} | "
            f"{(txn.bucket_code or '-'):10s} | {txn.description or ''} {refs}".rstrip()
        )


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group, name="statement")
