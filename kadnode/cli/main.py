"""KadNode command line.

Options are not declared to click: KadNode's own option catalog decides
what exists, so the raw argument vector is handed to the config loader.
"""

from __future__ import annotations

import click

from kadnode.collaborators import Collaborators
from kadnode.config.loader import run
from kadnode.models import FeatureSet


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": [],
    },
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def main(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Load and validate the node configuration."""
    features = FeatureSet.detect()
    argv = [ctx.info_name or "kadnode", *args]
    status, _config = run(argv, features, Collaborators())
    ctx.exit(status)
