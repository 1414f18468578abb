"""
Commands - click entry points for each workflow.

- deploy:       Deploy CardDrawing and write the deployment record
- draw:         Draw a random card
- mint:         Mint a catalog card and set its metadata
- set-metadata: Retry the metadata step for an already minted token
- details:      Read a token's card details
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from ..contract import CardDetails
from ..errors import CardDrawError
from ..rarity import rarity_label


def fail(exc: CardDrawError) -> NoReturn:
    """Report a workflow error and exit with its code."""
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


def env_file_from(ctx: click.Context) -> Optional[Path]:
    obj = ctx.find_root().obj or {}
    return obj.get("env_file")


def label(text: str) -> str:
    return click.style(f"  {text:<13}", dim=True)


def print_card(details: CardDetails) -> None:
    click.echo(label("Card ID:") + str(details.id))
    click.echo(label("Name:") + details.name)
    click.echo(label("Description:") + details.description)
    click.echo(label("Image:") + details.image)
    click.echo(label("Rarity:") + f"{rarity_label(details.rarity)} ({details.rarity})")
