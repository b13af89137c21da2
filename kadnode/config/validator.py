"""Defaulting and validation pass.

Runs once after every option has been applied. Fills in unset fields and
rejects combinations the daemon cannot start with.
"""

from __future__ import annotations

import ipaddress
import secrets
import time

from kadnode.config import defaults
from kadnode.config.parsers import (
    format_address,
    is_multicast,
    parse_address,
    parse_port,
)
from kadnode.exceptions import InvalidValueError
from kadnode.models import AddressFamily, FeatureSet, NodeConfig
from kadnode.utils.logging_config import get_logger

logger = get_logger(__name__)


def check_port(label: str, value: str, allow_zero: bool = True) -> int:
    """Validate a port field, naming it in the error."""
    try:
        return parse_port(value, allow_zero=allow_zero)
    except InvalidValueError as e:
        msg = f"Invalid {label} port '{value}'."
        raise InvalidValueError(msg) from e


def check_bind_address(value: str, family: AddressFamily) -> None:
    """Require a literal IP address of the active family."""
    try:
        ip = ipaddress.ip_address(value)
    except ValueError as e:
        msg = f"Invalid DHT address '{value}'."
        raise InvalidValueError(msg) from e
    if ip.version != (4 if family is AddressFamily.IPV4 else 6):
        msg = f"DHT address '{value}' does not match {family.label} mode."
        raise InvalidValueError(msg)


def apply_defaults(config: NodeConfig, features: FeatureSet) -> NodeConfig:
    """Fill in defaults and validate the configuration.

    Args:
        config: Record produced by the dispatcher
        features: Active feature set

    Returns:
        The same record, completed

    Raises:
        InvalidValueError: On a bad port, bind address, LPD address or DNS
            server address

    """
    if config.family is None:
        config.family = AddressFamily.IPV4
    family = config.family

    if config.query_tld is None:
        config.query_tld = defaults.QUERY_TLD_DEFAULT

    if config.node_id is None:
        config.node_id = secrets.token_bytes(defaults.NODE_ID_LENGTH).hex()

    if config.dht_port is None:
        config.dht_port = defaults.DHT_PORT

    if config.dht_addr is None:
        if family is AddressFamily.IPV4:
            config.dht_addr = defaults.DHT_ADDR4
        else:
            config.dht_addr = defaults.DHT_ADDR6

    if features.cmd and config.cmd_port is None:
        config.cmd_port = defaults.CMD_PORT
    if features.dns and config.dns_port is None:
        config.dns_port = defaults.DNS_PORT
    if features.nss and config.nss_port is None:
        config.nss_port = defaults.NSS_PORT
    if features.web and config.web_port is None:
        config.web_port = defaults.WEB_PORT

    check_port("DHT", config.dht_port, allow_zero=False)
    if features.cmd:
        check_port("CMD", config.cmd_port)
    if features.dns:
        check_port("DNS", config.dns_port)
    if features.nss:
        check_port("NSS", config.nss_port)
    if features.web:
        check_port("WEB", config.web_port)
    check_bind_address(config.dht_addr, family)

    if features.lpd and not config.lpd_disable:
        _check_lpd(config, family)

    if features.dns and config.dns_server is not None:
        ip, port = parse_address(config.dns_server, defaults.DNS_SERVER_PORT)
        config.dns_server_address = (str(ip), port)

    config.startup_time = time.time()
    return config


def _check_lpd(config: NodeConfig, family: AddressFamily) -> None:
    if config.lpd_addr is None:
        if family is AddressFamily.IPV4:
            config.lpd_addr = defaults.LPD_ADDR4
        else:
            config.lpd_addr = defaults.LPD_ADDR6

    ip, port = parse_address(config.lpd_addr, defaults.LPD_PORT, family)
    if not is_multicast(ip):
        msg = f"Multicast address expected: {format_address(ip, port)}"
        raise InvalidValueError(msg)

    config.lpd_address = (str(ip), port)
    logger.debug("LPD address resolved to %s", format_address(ip, port))
