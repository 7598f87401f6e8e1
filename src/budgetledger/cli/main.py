"""Main CLI entry point."""

import logging

import click
from budgetledger.database.factories import create_sqlite_database
from budgetledger.logging_config import configure_logging

# Import and register all commands at module level
from budgetledger.cli.commands import (
    account,
    budget,
    ledger,
    reconcile,
    statement,
    task,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETLEDGER_DB_PATH environment variable)",
    envvar="BUDGETLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log reconciliation progress to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Budgetledger - Monthly reconciliation for a personal ledger book.

    Record bank statement transactions, set budgeted amounts per bucket, and
    reconcile the ledger book against your bank balances each month.
    """
    ctx.ensure_object(dict)
    configure_logging(logging.INFO if verbose else logging.WARNING)

    # Only open the database when a command runs, not for --help
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
account.register_commands(cli)
budget.register_commands(cli)
ledger.register_commands(cli)
statement.register_commands(cli)
reconcile.register_commands(cli)
task.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
