"""Startup configuration loading.

``load_config`` parses the argument vector into a validated NodeConfig and
raises on any problem. ``run`` is the single place where those problems
become a logged diagnostic and a process exit status.
"""

from __future__ import annotations

from typing import Sequence

import click

from kadnode.collaborators import Collaborators
from kadnode.config.dispatcher import OptionDispatcher
from kadnode.config.sources import parse_command_line
from kadnode.config.validator import apply_defaults
from kadnode.exceptions import ConfigurationError, ExitRequested
from kadnode.models import FeatureSet, NodeConfig
from kadnode.utils.logging_config import get_logger, setup_logging
from kadnode.utils.version import version_string

logger = get_logger(__name__)


def load_config(
    argv: Sequence[str],
    features: FeatureSet | None = None,
    collaborators: Collaborators | None = None,
) -> NodeConfig:
    """Build the node configuration from the command line.

    Args:
        argv: Full argument vector, program name first
        features: Active feature set (detected when omitted)
        collaborators: Subsystems to delegate to (in-memory when omitted)

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: On any invalid option, value or file
        ExitRequested: For help, version and other terminating options

    """
    if features is None:
        features = FeatureSet.detect()
    if collaborators is None:
        collaborators = Collaborators()

    config = NodeConfig.create(features)
    dispatcher = OptionDispatcher(config, features, collaborators)
    dispatcher.run(parse_command_line(argv))
    return apply_defaults(config, features)


def log_config_summary(config: NodeConfig, features: FeatureSet) -> None:
    """Log the effective configuration at startup."""
    logger.info("Starting %s", version_string(features))
    logger.info("Node ID: %s", config.node_id)
    logger.info("IP Mode: %s", config.family.label if config.family else "unset")
    logger.info("Run Mode: %s", "Daemon" if config.is_daemon else "Foreground")
    if config.configfile:
        logger.info("Configuration File: '%s'", config.configfile)
    logger.info("Verbosity: %s", config.verbosity.value)
    logger.info("Query TLD: %s", config.query_tld)
    logger.info("Peer File: %s", config.peerfile or "None")
    if features.lpd:
        logger.info(
            "LPD Address: %s",
            "Disabled" if config.lpd_disable else config.lpd_addr,
        )
    if features.dns and config.dns_server:
        logger.info("Forward foreign DNS requests to %s", config.dns_server)


def run(
    argv: Sequence[str],
    features: FeatureSet | None = None,
    collaborators: Collaborators | None = None,
) -> tuple[int, NodeConfig | None]:
    """Load the configuration and map the outcome to an exit status.

    Returns:
        Tuple of (exit_status, config). The config is None whenever the
        process must stop.

    """
    if features is None:
        features = FeatureSet.detect()

    # Diagnostics raised while parsing use the build's default verbosity
    setup_logging(NodeConfig.create(features).verbosity)

    try:
        config = load_config(argv, features, collaborators)
    except ExitRequested as e:
        if e.output:
            click.echo(e.output)
        return e.exit_code, None
    except ConfigurationError as e:
        logger.error("CFG: %s", e)
        return 1, None

    setup_logging(config.verbosity)
    log_config_summary(config, features)
    return 0, config
