"""Budget bucket and budgeted amount commands."""

import click

from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from budgetledger.domain.budget import BudgetService
from budgetledger.domain.entities import BucketKind

BUCKET_KINDS = [k.value for k in BucketKind]


@click.group()
def bucket_group():
    """Manage budget buckets."""
    pass


@bucket_group.command("create")
@click.argument("code", metavar="CODE")
@click.option("--description", default="", help="Bucket description")
@click.option(
    "--kind",
    type=click.Choice(BUCKET_KINDS),
    default=BucketKind.SPENT_MONTHLY.value,
    show_default=True,
    help="Bucket kind",
)
@click.pass_context
def create_bucket(ctx, code: str, description: str, kind: str):
    """Create a budget bucket.

    Examples:
        budgetledger bucket create POWER --description "Electricity"
        budgetledger bucket create HAIR --kind saved_up_for
    """
    service = BudgetService(ctx.obj["db"])
    try:
        service.create_bucket(code=code, description=description, kind=BucketKind(kind))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bucket '{code}'")


@bucket_group.command("list")
@click.pass_context
def list_buckets(ctx):
    """List budget buckets."""
    service = BudgetService(ctx.obj["db"])
    buckets = service.list_buckets()
    if not buckets:
        click.echo("No buckets found.")
        return

    click.echo("\nBuckets:")
    click.echo("-" * 60)
    for bucket in buckets:
        status = "" if bucket.active else " | disabled"
        click.echo(f"{bucket.code:12s} | {bucket.kind.value:14s} | {bucket.description}{status}")


@bucket_group.command("disable")
@click.argument("code", metavar="CODE")
@click.pass_context
def disable_bucket(ctx, code: str):
    """Disable a bucket. It is allocated nothing until enabled again."""
    try:
        BudgetService(ctx.obj["db"]).set_bucket_active(code, False)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Disabled bucket '{code}'")


@bucket_group.command("enable")
@click.argument("code", metavar="CODE")
@click.pass_context
def enable_bucket(ctx, code: str):
    """Enable a disabled bucket."""
    try:
        BudgetService(ctx.obj["db"]).set_bucket_active(code, True)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Enabled bucket '{code}'")


@click.group()
def budget_group():
    """Manage budgeted monthly amounts."""
    pass


@budget_group.command("set")
@click.argument("code", metavar="CODE")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def set_expense(ctx, code: str, amount: str):
    """Set the monthly budgeted AMOUNT for bucket CODE.

    Examples:
        budgetledger budget set POWER 140.00
    """
    value = parse_amount_or_exit(ctx, amount)
    try:
        BudgetService(ctx.obj["db"]).set_expense(code, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Budgeted {value:,.2f} for '{code}'")


@budget_group.command("remove")
@click.argument("code", metavar="CODE")
@click.pass_context
def remove_expense(ctx, code: str):
    """Stop budgeting for bucket CODE."""
    try:
        BudgetService(ctx.obj["db"]).remove_expense(code)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed budgeted amount for '{code}'")


@budget_group.command("rename")
@click.argument("name", metavar="NAME")
@click.option("--effective-from", default="today", help="Date the budget applies from")
@click.pass_context
def rename_budget(ctx, name: str, effective_from: str):
    """Name the budget and set the date it applies from."""
    when = parse_date_or_exit(ctx, effective_from, "effective date")
    BudgetService(ctx.obj["db"]).set_budget(name, when)
    click.echo(f"Budget '{name}' effective from {when}")


@budget_group.command("show")
@click.pass_context
def show_budget(ctx):
    """Show budgeted monthly amounts."""
    budget = BudgetService(ctx.obj["db"]).get_budget()
    if budget is None or not budget.expenses:
        click.echo("No budgeted amounts found.")
        return

    click.echo(f"\n{budget.name} (effective {budget.effective_from}):")
    click.echo("-" * 60)
    total = 0
    for expense in budget.expenses:
        status = "" if expense.bucket.active else " (disabled)"
        click.echo(f"{expense.bucket.code:12s} {expense.amount:>12,.2f}{status}")
        total += expense.amount
    click.echo("-" * 60)
    click.echo(f"{'Total':12s} {total:>12,.2f}")


def register_commands(cli):
    """Register bucket and budget commands with main CLI."""
    cli.add_command(bucket_group, name="bucket")
    cli.add_command(budget_group, name="budget")
