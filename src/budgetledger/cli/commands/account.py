"""Account management commands."""

import click

from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.domain.account import AccountService
from budgetledger.domain.entities import AccountType

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES),
    default=AccountType.CHEQUE.value,
    show_default=True,
    help="Account type",
)
@click.option("--salary", is_flag=True, help="Income is paid into this account")
@click.pass_context
def create_account(ctx, name: str, account_type: str, salary: bool):
    """Create a new account.

    Examples:
        budgetledger account create "Cheque" --salary
        budgetledger account create "Savings" --type savings
        budgetledger account create "Visa" --type credit_card
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(
            name=name, account_type=AccountType(account_type), is_salary_account=salary
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")
    if salary:
        click.echo("Marked as the salary account")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        salary = " | salary" if acc.is_salary_account else ""
        click.echo(f"{acc.name:20s} | {acc.account_type.value:12s}{salary}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
