"""Task list commands."""

import click

from budgetledger.cli.commands.reconcile import format_task
from budgetledger.cli.error_handling import handle_domain_error
from budgetledger.domain.todo import TaskService


@click.group()
def task_group():
    """Review follow-up tasks raised by reconciliations."""
    pass


@task_group.command("list")
@click.pass_context
def list_tasks(ctx):
    """List outstanding tasks."""
    tasks = TaskService(ctx.obj["db"]).list_tasks()
    if not tasks:
        click.echo("No tasks found.")
        return

    for task_id, task in tasks:
        click.echo(f"{task_id:4d} {format_task(task)}")


@task_group.command("remove")
@click.argument("task_id", type=int)
@click.pass_context
def remove_task(ctx, task_id: int):
    """Remove a completed task."""
    try:
        TaskService(ctx.obj["db"]).remove_task(task_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed task {task_id}")


def register_commands(cli):
    """Register task commands with main CLI."""
    cli.add_command(task_group, name="task")
