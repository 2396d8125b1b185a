"""
Autonate CLI: configure and deploy the Liberation Organization.

Commands are grouped in modules and registered on the main Click
group via register functions.

Entry point: autonate.cli:main
"""

from __future__ import annotations

import logging

import click
from dotenv import load_dotenv

from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="autonate")
@click.option("-v", "--verbose", count=True, help="-v for progress logs, -vv for debug.")
def main(verbose: int):
    """Autonate: the Liberation Organization deployment kit.

    Give coordinators their lives back.
    """
    # Existing environment variables win over .env entries
    load_dotenv(override=False)

    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


# ---------------------------------------------------------------------------
# Register all command groups/commands from modular files
# ---------------------------------------------------------------------------

from .deploy import register_deploy_commands
from .org import register_org_commands

register_deploy_commands(main)
register_org_commands(main)
