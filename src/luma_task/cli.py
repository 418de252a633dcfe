"""Command-line interface for Luma Task."""

import logging
from pathlib import Path
from typing import Optional

import click
from fuzzywuzzy import process
from rich.console import Console
from rich.table import Table

from .config import ConfigModel, get_config, load_config
from .parsers import ParsedTask, TaskParser
from .service import TaskNotFoundError, TaskService
from .storage import StorageError, TaskStore
from .task import Task
from .utils.datetime import now_local, parse_date_option

console = Console()


def get_service(config: ConfigModel) -> TaskService:
    """Get a service wired to the configured store and parser."""
    return TaskService(TaskStore.from_config(config), TaskParser.from_config(config))


def format_due(config: ConfigModel, task_due) -> str:
    if task_due is None:
        return ""
    return task_due.strftime(f"{config.date_format} {config.time_format}")


def format_task_for_display(task: Task, config: ConfigModel, show_id: bool = True) -> str:
    """Format a task for display."""
    text_parts = []
    if show_id:
        text_parts.append(f"[dim]{task.id}[/dim]")

    status_icon = "✅" if task.is_completed else "⏳"
    if config.use_emoji:
        text_parts.append(status_icon)
        if task.icon:
            text_parts.append(task.icon)

    text_parts.append(f"[strike]{task.title}[/strike]" if task.is_completed else task.title)

    if task.due_date:
        style = "red" if task.is_overdue() else "cyan"
        text_parts.append(f"[{style}]{format_due(config, task.due_date)}[/{style}]")

    if task.recurrence:
        text_parts.append(f"[magenta]↻ {task.recurrence.describe()}[/magenta]")

    if task.tags:
        text_parts.append(f"[blue]{' '.join('#' + tag for tag in task.tags)}[/blue]")

    return " ".join(text_parts)


def print_preview(parsed: ParsedTask, config: ConfigModel):
    table = Table(title="Erkannt", show_header=False)
    table.add_column("Feld", style="bold")
    table.add_column("Wert")
    table.add_row("Titel", parsed.title)
    table.add_row("Fällig", format_due(config, parsed.date) or "-")
    table.add_row("Wiederholung", parsed.recurrence.describe() if parsed.recurrence else "-")
    table.add_row("Tags", ", ".join(sorted(parsed.tags)) or "-")
    table.add_row("Icon", parsed.icon or "-")
    console.print(table)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, verbose):
    """Luma Task - tasks from plain sentences."""
    ctx.ensure_object(dict)
    config = load_config(config_path)
    level = logging.DEBUG if verbose else getattr(logging, str(config.log_level).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj["config"] = config
    ctx.obj["service"] = get_service(config)


def _service(ctx) -> TaskService:
    return ctx.obj["service"]


def _config(ctx) -> ConfigModel:
    return ctx.obj.get("config") or get_config()


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--due", "-d", help="Explicit due date, overrides anything in the text")
@click.pass_context
def add(ctx, text, due):
    """Add a task from a sentence, e.g. "Zahnarzt morgen 14:30"."""
    sentence = " ".join(text)
    due_override = None
    if due:
        due_override = parse_date_option(due)
        if due_override is None:
            raise click.BadParameter(f"Could not understand date {due!r}", param_hint="--due")
    try:
        task = _service(ctx).add(sentence, due_override=due_override)
    except StorageError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]✓[/green] Added: {format_task_for_display(task, _config(ctx))}")


@main.command()
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def parse(ctx, text):
    """Show what would be recognised, without saving."""
    print_preview(_service(ctx).preview(" ".join(text)), _config(ctx))


@main.command(name="list")
@click.option("--all", "show_all", is_flag=True, help="Include completed tasks")
@click.option("--tag", "-t", help="Only tasks with this tag")
@click.pass_context
def list_tasks(ctx, show_all, tag):
    """List tasks."""
    service = _service(ctx)
    config = _config(ctx)
    try:
        tasks = service.list_open(tag)
        if show_all:
            done = [t for t in service.store.all() if t.is_completed]
            if tag:
                done = [t for t in done if tag.lower() in (x.lower() for x in t.tags)]
            tasks = tasks + done
        known = service.known_tags() if tag and not tasks else []
    except StorageError as e:
        raise click.ClickException(str(e))

    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        if known:
            match = process.extractOne(tag, known, score_cutoff=60)
            if match:
                console.print(f"Did you mean [blue]#{match[0]}[/blue]?")
        return

    for task in tasks:
        console.print(format_task_for_display(task, config))


@main.command()
@click.pass_context
def today(ctx):
    """Tasks due today."""
    config = _config(ctx)
    tasks = _service(ctx).due_today(now_local())
    if not tasks:
        console.print("[dim]Nothing due today.[/dim]")
        return
    for task in tasks:
        console.print(format_task_for_display(task, config))


def _run(ctx, action):
    try:
        return action(_service(ctx))
    except (TaskNotFoundError, StorageError) as e:
        raise click.ClickException(str(e))


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def done(ctx, task_id):
    """Mark a task as completed."""
    follow_up = _run(ctx, lambda s: s.complete(task_id))
    console.print(f"[green]✓[/green] Completed task {task_id}")
    if follow_up:
        console.print(f"↻ Next: {format_task_for_display(follow_up, _config(ctx))}")


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def reopen(ctx, task_id):
    """Reopen a completed task."""
    task = _run(ctx, lambda s: s.reopen(task_id))
    console.print(f"Reopened: {format_task_for_display(task, _config(ctx))}")


@main.command()
@click.argument("task_id", type=int)
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def edit(ctx, task_id, text):
    """Re-parse a task from new text."""
    task = _run(ctx, lambda s: s.edit(task_id, " ".join(text)))
    console.print(f"Updated: {format_task_for_display(task, _config(ctx))}")


@main.command()
@click.argument("task_id", type=int)
@click.option("--days", default=1, show_default=True, type=click.IntRange(min=1),
              help="Days to postpone by")
@click.pass_context
def postpone(ctx, task_id, days):
    """Push a task's due date back."""
    task = _run(ctx, lambda s: s.postpone(task_id, days))
    console.print(f"Postponed: {format_task_for_display(task, _config(ctx))}")


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def delete(ctx, task_id):
    """Delete a task."""
    _run(ctx, lambda s: s.delete(task_id))
    console.print(f"Deleted task {task_id}")


@main.command(name="export")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export_tasks(ctx, path: Optional[Path]):
    """Export all tasks as JSON (to stdout without PATH)."""
    data = _run(ctx, lambda s: s.export_json())
    if path is None:
        click.echo(data)
        return
    path.write_text(data, encoding="utf-8")
    console.print(f"Exported tasks to {path}")


@main.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_tasks(ctx, path: Path):
    """Merge tasks from a JSON export."""
    try:
        count = _run(ctx, lambda s: s.import_json(path.read_text(encoding="utf-8")))
    except (KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid export file: {e}")
    console.print(f"Imported {count} tasks")


if __name__ == "__main__":
    main()
