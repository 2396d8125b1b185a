"""Deployment commands: deploy, check."""

from __future__ import annotations

import json
import sys
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from ._common import ENVIRONMENTS, build_config, console, snapshot_environ
from ..errors import AutonateError


def register_deploy_commands(main: click.Group) -> None:
    """Register deploy and check on the main CLI group."""

    @main.command("deploy")
    @click.option("--env", "env", type=ENVIRONMENTS, default=None,
                  help="Target environment (default: AUTONATE_ENV or production).")
    @click.option("--manifest", type=click.Path(dir_okay=False), default=None,
                  help="Deployment manifest to submit (default: compute3-deploy.yaml).")
    @click.option("--build-root", type=click.Path(file_okay=False), default=None,
                  help="Directory holding the per-agent docker/ build contexts.")
    @click.option("--workspace", default=None, help="Override the Compute3 workspace.")
    @click.option("--endpoint", default=None, help="Override the Compute3 API endpoint.")
    @click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
    @click.option("--json-out", is_flag=True, help="Print the result as JSON.")
    def deploy(
        env: Optional[str],
        manifest: Optional[str],
        build_root: Optional[str],
        workspace: Optional[str],
        endpoint: Optional[str],
        yes: bool,
        json_out: bool,
    ):
        """Build, publish and deploy the Liberation Organization.

        \b
        Stages: validate -> build -> publish -> deploy -> wait -> verify -> smoke-test
        Any failure rolls back and exits non-zero.

        \b
        Example:
            autonate deploy --env staging
            autonate -v deploy --manifest compute3-deploy.yaml --yes
        """
        from ..pipeline import AutonateDeployer

        environ = snapshot_environ()
        config = build_config(environ, env, manifest, build_root, workspace, endpoint)
        deployer = AutonateDeployer(config, environ)

        if not json_out:
            console.print()
            console.print(
                Panel(
                    f"[bold]Deploying Autonate Liberation Organization[/]\n\n"
                    f"  Deployment:  {deployer.deployment_id}\n"
                    f"  Environment: {config.environment.value}\n"
                    f"  Workspace:   {config.workspace}\n"
                    f"  Registry:    {config.registry}\n"
                    f"  Agents:      {len(deployer.agents)}",
                    title="Compute3 Deployment",
                    border_style="bright_blue",
                    padding=(1, 2),
                )
            )
            if not yes and not click.confirm("\n  Proceed with deployment?", default=True):
                console.print("  [dim]Cancelled.[/]\n")
                return

        try:
            if json_out:
                result = deployer.deploy()
            else:
                with console.status("[bold cyan]Deploying agents...[/]"):
                    result = deployer.deploy()
        except AutonateError as exc:
            if json_out:
                payload = exc.to_dict()
                payload["deployment_id"] = deployer.deployment_id
                payload["stage"] = deployer.stage.value
                click.echo(json.dumps(payload, indent=2))
            else:
                console.print(
                    Panel(
                        f"  [bold]Deployment:[/] {deployer.deployment_id}\n"
                        f"  [bold]Stage:[/]      {deployer.stage.value}\n"
                        f"  [bold]Error:[/]      [red]{exc.message}[/]",
                        title="Deployment Failed",
                        border_style="red",
                        padding=(1, 2),
                    )
                )
            sys.exit(1)

        if json_out:
            click.echo(json.dumps(result.to_dict(), indent=2))
            return

        console.print(
            Panel(
                f"  [bold]Deployment:[/] {result.deployment_id}\n"
                f"  [bold]Platform:[/]   {result.server_deployment_id}\n"
                f"  [bold]Status:[/]     [green]{result.status}[/]\n"
                f"  [bold]Smoke tests:[/] {len(result.smoke_tests_passed)} passed",
                title="Deployment Complete",
                border_style="green",
                padding=(1, 2),
            )
        )

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Agent", style="cyan")
        table.add_column("Image", style="dim")
        table.add_column("Status")
        for agent, image in zip(result.agents, result.images):
            table.add_row(agent, image, "[green]healthy[/]")
        console.print(table)
        console.print("\n  [bold bright_magenta]Coordinators are now free to take breaks![/]\n")

    @main.command("check")
    @click.option("--endpoint", default=None, help="Override the Compute3 API endpoint.")
    @click.option("--json-out", is_flag=True, help="Print the result as JSON.")
    def check(endpoint: Optional[str], json_out: bool):
        """Check deploy prerequisites without deploying.

        Reports missing credentials, whether Compute3 answers /health, and
        whether the docker binary is on PATH.

        Example:

            autonate check
        """
        from ..docker import DockerCLI
        from ..pipeline import EnvironmentValidator, REQUIRED_ENV_VARS, missing_variables
        from ..platform import Compute3Client

        environ = snapshot_environ()
        config = build_config(environ, endpoint=endpoint)
        missing = missing_variables(environ)
        docker_ok = DockerCLI().available

        error: Optional[AutonateError] = None
        try:
            EnvironmentValidator(config, environ, Compute3Client(config)).validate()
        except AutonateError as exc:
            error = exc

        if json_out:
            click.echo(json.dumps({
                "endpoint": config.endpoint,
                "missing": missing,
                "docker": docker_ok,
                "ok": error is None and docker_ok,
                "error": error.to_dict() if error else None,
            }, indent=2))
        else:
            console.print()
            table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
            table.add_column("Variable", style="cyan")
            table.add_column("Status")
            for name in REQUIRED_ENV_VARS:
                ok = name not in missing
                table.add_row(name, "[green]set[/]" if ok else "[red]missing[/]")
            table.add_row("docker", "[green]found[/]" if docker_ok else "[red]not on PATH[/]")
            console.print(table)
            console.print()
            if error is None:
                console.print(f"  [green]Compute3 reachable at {config.endpoint}[/]\n")
            else:
                console.print(f"  [red]{error.message}[/]\n")

        if error is not None or not docker_ok:
            sys.exit(1)
