"""CLI entry point for RoleBaker."""

from __future__ import annotations

import importlib
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from rolebaker.config import RoleBakerConfig, load_config
from rolebaker.config.loader import DEFAULT_CONFIG_TEMPLATE
from rolebaker.docs import PermissionDocumentationReport, ReportWriter, render_report
from rolebaker.docs.models import ALLOWED, is_conditional
from rolebaker.engine import BakedAuthorization
from rolebaker.errors import MissingActionDocsError
from rolebaker.log import configure_logging
from rolebaker.permissions import MultiRoleUser, RoleMode, SingleRoleUser

app = typer.Typer(
    name="rolebaker",
    help="Role and attribute based permission checks with generated permission docs.",
)

config_app = typer.Typer(help="Manage RoleBaker configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: RoleBakerConfig | None = None


def _get_config() -> RoleBakerConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to rolebaker.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    configure_logging(_config.log_level, _config.log_format)


def _load_target(target: str) -> BakedAuthorization:
    """Import ``package.module:attribute`` and return the baked authorization.

    Raises ValueError if the target is malformed or is not a BakedAuthorization.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid target '{target}': expected 'module:attribute'")
    # Console scripts do not put the working directory on sys.path.
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(f"'{module_name}' has no attribute '{attr_path}'") from e
    if not isinstance(obj, BakedAuthorization):
        raise ValueError(
            f"'{target}' is a {type(obj).__name__}, expected the result of bake_authorization()"
        )
    return obj


def _style_status(status: str) -> str:
    if status == ALLOWED:
        return f"[green]{status}[/green]"
    if is_conditional(status):
        return f"[yellow]{escape(status)}[/yellow]"
    return f"[red]{status}[/red]"


def _display_report(report: PermissionDocumentationReport) -> None:
    """Display the permission matrix as a Rich table."""
    table = Table(title=f"Permissions ({report.user_role_mode.value})")
    for col in report.report_header:
        table.add_column(escape(col.column_name), style=None if col.is_role else "cyan")
    fixed = len(report.report_header) - len(report.role_columns())
    for row in report.report_rows:
        table.add_row(*(escape(c) for c in row[:fixed]), *(_style_status(s) for s in row[fixed:]))
    rprint(table)


@app.command()
def docs(
    target: str = typer.Argument(..., help="Baked authorization as 'module:attribute'"),
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="table, markdown, csv, json or yaml"),
    ] = "table",
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the report into this directory")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show destination without writing"),
) -> None:
    """Generate the permission documentation report."""
    cfg = _get_config()
    try:
        baked = _load_target(target)
        report = baked.generate_permission_docs()
    except (ValueError, MissingActionDocsError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if output is None and format == "table":
        _display_report(report)
        return

    if output is None:
        try:
            typer.echo(render_report(report, format), nl=False)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        return

    docs_cfg = cfg.docs.model_copy(update={"base_dir": output})
    fmt = docs_cfg.format if format == "table" else format
    try:
        dest = ReportWriter(docs_cfg).write(report, fmt, dry_run=dry_run)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    verb = "Would write" if dry_run else "Wrote"
    rprint(Panel(
        f"[dim]File:[/dim]      {dest}\n"
        f"[dim]Rows:[/dim]      {len(report.report_rows)}\n"
        f"[dim]Roles:[/dim]     {', '.join(report.role_columns())}",
        title=f"{verb} Permission Docs",
        border_style="green",
    ))


@app.command()
def check(
    target: str = typer.Argument(..., help="Baked authorization as 'module:attribute'"),
    resource: str = typer.Argument(..., help="Resource name"),
    action: str = typer.Argument(..., help="Action name"),
    role: Annotated[
        list[str] | None, typer.Option("--role", "-r", help="Role held by the principal")
    ] = None,
    user_id: Annotated[
        str | None, typer.Option("--user-id", help="Principal identifier")
    ] = None,
) -> None:
    """Check one permission for a principal. Exit 0 if allowed, 1 if denied."""
    roles = role or []
    try:
        baked = _load_target(target)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    if baked.mode is RoleMode.MULTI_ROLE:
        principal = MultiRoleUser(roles=roles, user_id=user_id)
    else:
        if len(roles) > 1:
            rprint("[red]Error:[/red] single-role engine accepts exactly one --role")
            raise typer.Exit(2)
        principal = SingleRoleUser(role=roles[0], user_id=user_id) if roles else None

    allowed = baked.has_permission(principal, resource, action)
    label = "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"
    rprint(f"{label} {escape(resource)}.{escape(action)} for roles: {', '.join(roles) or '(none)'}")
    if not allowed:
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default rolebaker.yaml in current directory."""
    target = Path("rolebaker.yaml")
    if target.exists() and not force:
        rprint("[yellow]rolebaker.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
