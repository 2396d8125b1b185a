"""Organization commands: org show, org validate, org export, dockerfile."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from ._common import console


def _load(file: Optional[str]):
    """Load an organization or exit with a readable error."""
    from ..organization import load_organization

    try:
        return load_organization(Path(file) if file else None)
    except (OSError, ValueError, ValidationError) as exc:
        console.print(f"\n  [red]Invalid organization:[/] {exc}\n")
        sys.exit(1)


def register_org_commands(main: click.Group) -> None:
    """Register the org command group and dockerfile command."""

    @main.group()
    def org():
        """Inspect and export the Liberation Organization.

        \b
        Show:     autonate org show
        Validate: autonate org validate my-org.yaml
        Export:   autonate org export --out compute3-deploy.yaml
        """

    @org.command("show")
    @click.option("--file", "file", type=click.Path(dir_okay=False), default=None,
                  help="Organization document (default: built-in).")
    def org_show(file: Optional[str]):
        """Show agents, teams and workflows."""
        organization = _load(file)
        orchestrator = organization.orchestrator

        console.print()
        console.print(
            Panel(
                f"[bold]{organization.name}[/]\n\n"
                f"  {organization.description}\n\n"
                f"  [dim]Mission:[/]      {organization.mission}\n"
                f"  [dim]Orchestrator:[/] {orchestrator.name if orchestrator else 'none'}\n"
                f"  [dim]Workspace:[/]    {organization.settings.compute3.workspace}",
                title=f"Organization: {organization.slug}",
                border_style="bright_blue",
                padding=(1, 2),
            )
        )

        agents = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        agents.add_column("Agent", style="bold cyan")
        agents.add_column("Role")
        agents.add_column("Model")
        agents.add_column("Plugins", style="dim")
        for agent in organization.agents:
            agents.add_row(
                agent.id,
                agent.role.value,
                f"{agent.model_provider.value}/{agent.model}",
                ", ".join(agent.plugins),
            )
        console.print(agents)

        console.print("\n  [bold]Teams[/]")
        for team in organization.teams:
            console.print(f"    [cyan]{team.name}[/]: {', '.join(team.agents)}")

        console.print("\n  [bold]Workflows[/]")
        for wf in organization.workflows:
            every = f" every {wf.interval}" if wf.interval else ""
            chain = " -> ".join(f"{s.agent}.{s.action}" for s in wf.steps)
            console.print(f"    [cyan]{wf.name}[/] [dim]({wf.trigger}{every})[/]")
            console.print(f"      {chain}")
            console.print(f"      [dim]agents: {', '.join(wf.agents)}[/]")
        console.print()

    @org.command("validate")
    @click.argument("file", type=click.Path(exists=True, dir_okay=False))
    def org_validate(file: str):
        """Validate an organization document."""
        organization = _load(file)
        console.print(
            f"\n  [green]Valid:[/] {organization.name} "
            f"({len(organization.agents)} agents, {len(organization.teams)} teams, "
            f"{len(organization.workflows)} workflows)\n"
        )

    @org.command("export")
    @click.option("--file", "file", type=click.Path(dir_okay=False), default=None,
                  help="Organization document (default: built-in).")
    @click.option("--out", default="compute3-deploy.yaml", type=click.Path(dir_okay=False),
                  help="Manifest path to write.")
    def org_export(file: Optional[str], out: str):
        """Write the deployment manifest submitted by `autonate deploy`."""
        from ..organization import export_manifest

        organization = _load(file)
        path = export_manifest(organization, Path(out))
        console.print(f"\n  [green]Manifest written:[/] {path}\n")

    @main.command("dockerfile")
    @click.argument("agent")
    def dockerfile(agent: str):
        """Print the generated Dockerfile for one agent."""
        from ..agents import AGENT_IDS
        from ..docker import render_dockerfile

        if agent not in AGENT_IDS:
            console.print(f"\n  [red]Unknown agent '{agent}'.[/] Known: {', '.join(AGENT_IDS)}\n")
            sys.exit(1)
        click.echo(render_dockerfile(agent), nl=False)
