"""CLI helpers for parsing dates and amounts from options."""

from datetime import date
from decimal import Decimal

import click

from budgetledger.utils.amount_parser import parse_amount, parse_balance
from budgetledger.utils.date_parser import parse_date


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, exiting with an error message when invalid."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    """Parse an amount option, exiting with an error message when invalid."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_balances_or_exit(ctx: click.Context, values: tuple[str, ...]) -> dict[str, Decimal]:
    """Parse repeated ACCOUNT=AMOUNT options into a dict."""
    balances: dict[str, Decimal] = {}
    for value in values:
        try:
            name, amount = parse_balance(value)
        except ValueError as e:
            click.echo(f"Error: Invalid balance: {e}", err=True)
            ctx.exit(1)
        if name in balances:
            click.echo(f"Error: Balance for '{name}' given more than once", err=True)
            ctx.exit(1)
        balances[name] = amount
    return balances
