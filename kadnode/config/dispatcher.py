"""Option dispatcher.

Walks an ArgumentStream left to right and applies each option to the
NodeConfig or hands it to a collaborator. Every failure raises a
ConfigurationError; nothing is retried or skipped.
"""

from __future__ import annotations

from typing import Callable

from kadnode.collaborators import Collaborators
from kadnode.config.defaults import ANNOUNCE_FOREVER
from kadnode.config.options import OptionCode, find_code
from kadnode.config.parsers import parse_tls_server_entry, parse_value_id
from kadnode.config.sources import ArgumentStream, OptionPair, merge_args
from kadnode.config.usage import usage_text
from kadnode.exceptions import (
    ArgumentExpectedError,
    ConfigurationError,
    DuplicateOptionError,
    ExitRequested,
    InvalidValueError,
    UnexpectedArgumentError,
    UnknownOptionError,
)
from kadnode.models import AddressFamily, FeatureSet, NodeConfig, Verbosity
from kadnode.utils.logging_config import get_logger
from kadnode.utils.version import version_string

logger = get_logger(__name__)

# Options stored verbatim in a NodeConfig string field
STRING_OPTIONS: dict[OptionCode, str] = {
    OptionCode.QUERY_TLD: "query_tld",
    OptionCode.PID_FILE: "pidfile",
    OptionCode.PEER_FILE: "peerfile",
    OptionCode.CMD_PORT: "cmd_port",
    OptionCode.DNS_PORT: "dns_port",
    OptionCode.DNS_SERVER: "dns_server",
    OptionCode.NSS_PORT: "nss_port",
    OptionCode.WEB_PORT: "web_port",
    OptionCode.PORT: "dht_port",
    OptionCode.ADDR: "dht_addr",
    OptionCode.LPD_ADDR: "lpd_addr",
    OptionCode.IFNAME: "dht_ifname",
    OptionCode.USER: "user",
}

# Valueless options setting a NodeConfig flag
FLAG_OPTIONS: dict[OptionCode, str] = {
    OptionCode.CMD_DISABLE_STDIN: "cmd_disable_stdin",
    OptionCode.LPD_DISABLE: "lpd_disable",
    OptionCode.FWD_DISABLE: "fwd_disable",
    OptionCode.SERVICE_START: "service_start",
    OptionCode.DAEMON: "is_daemon",
}


def set_once(config: NodeConfig, field: str, option: str, value: str | None) -> None:
    """Store a string option that may only be given once.

    Raises:
        ArgumentExpectedError: If no value was given
        DuplicateOptionError: If the field is already set

    """
    if value is None:
        raise ArgumentExpectedError(option)
    if getattr(config, field) is not None:
        raise DuplicateOptionError(option)
    setattr(config, field, value)


def require_value(pair: OptionPair) -> str:
    """Return the pair's value or fail with ArgumentExpectedError."""
    if pair.value is None:
        raise ArgumentExpectedError(pair.option)
    return pair.value


def require_no_value(pair: OptionPair) -> None:
    """Fail with UnexpectedArgumentError if the pair carries a value."""
    if pair.value is not None:
        raise UnexpectedArgumentError(pair.option)


class OptionDispatcher:
    """Applies options to a NodeConfig."""

    def __init__(
        self,
        config: NodeConfig,
        features: FeatureSet,
        collaborators: Collaborators,
    ):
        """Initialize the dispatcher.

        Args:
            config: Record to fill in
            features: Active feature set, decides which options exist
            collaborators: Subsystems options are delegated to

        """
        self.config = config
        self.features = features
        self.collaborators = collaborators
        self.stream: ArgumentStream = ()
        self.announced_ports: list[int] = []
        self._handlers: dict[OptionCode, Callable[[OptionPair], None]] = {
            OptionCode.PEER: self._handle_peer,
            OptionCode.VERBOSITY: self._handle_verbosity,
            OptionCode.TLS_CLIENT_ENTRY: self._handle_tls_client_entry,
            OptionCode.TLS_SERVER_ENTRY: self._handle_tls_server_entry,
            OptionCode.CONFIG: self._handle_config,
            OptionCode.MODE: self._handle_mode,
            OptionCode.VALUE_ID: self._handle_value_id,
            OptionCode.SERVICE_INSTALL: self._handle_service_install,
            OptionCode.SERVICE_REMOVE: self._handle_service_remove,
            OptionCode.BOB_GEN_KEYS: self._handle_bob_gen_keys,
            OptionCode.BOB_ADD_SKEY: self._handle_bob_add_skey,
            OptionCode.HELP: self._handle_help,
            OptionCode.VERSION: self._handle_version,
        }

    def run(self, stream: ArgumentStream) -> None:
        """Consume the whole stream.

        The stream may grow while it is consumed: a --config option appends
        the file's entries to the end.
        """
        self.stream = stream
        index = 0
        while index < len(self.stream):
            self.handle(self.stream[index])
            index += 1
        self._request_forwarding()

    def handle(self, pair: OptionPair) -> None:
        """Apply a single option."""
        code = find_code(pair.option, self.features)
        logger.debug("Option %s (%s)", pair.option, pair.describe())

        if code is OptionCode.UNKNOWN:
            raise UnknownOptionError(pair.option)

        if code in STRING_OPTIONS:
            set_once(self.config, STRING_OPTIONS[code], pair.option, pair.value)
        elif code in FLAG_OPTIONS:
            require_no_value(pair)
            setattr(self.config, FLAG_OPTIONS[code], True)
        else:
            self._handlers[code](pair)

    def _handle_peer(self, pair: OptionPair) -> None:
        self.collaborators.peers.add_peer(require_value(pair))

    def _handle_verbosity(self, pair: OptionPair) -> None:
        value = require_value(pair)
        try:
            self.config.verbosity = Verbosity(value)
        except ValueError as e:
            msg = f"Invalid argument for {pair.option}."
            raise InvalidValueError(msg) from e

    def _handle_tls_client_entry(self, pair: OptionPair) -> None:
        value = require_value(pair)
        if not self.collaborators.tls.add_ca_entry(value):
            msg = f"Invalid CA entry for {pair.option}: {value}"
            raise InvalidValueError(msg)

    def _handle_tls_server_entry(self, pair: OptionPair) -> None:
        entry = parse_tls_server_entry(require_value(pair))
        self.collaborators.tls.add_sni_entry(
            entry.domain, entry.cert_path, entry.key_path
        )

    def _handle_config(self, pair: OptionPair) -> None:
        value = require_value(pair)
        if self.config.configfile is not None:
            raise DuplicateOptionError(pair.option)
        self.config.configfile = value
        self.stream = merge_args(self.stream, value)

    def _handle_mode(self, pair: OptionPair) -> None:
        value = require_value(pair)
        if self.config.family is not None:
            raise DuplicateOptionError(pair.option)
        try:
            self.config.family = AddressFamily(value)
        except ValueError as e:
            msg = f"Invalid argument for {pair.option}. Use 'ipv4' or 'ipv6'."
            raise InvalidValueError(msg) from e

    def _handle_value_id(self, pair: OptionPair) -> None:
        identifier, port = parse_value_id(require_value(pair))
        try:
            chosen = self.collaborators.dht.announce(
                identifier, port, ANNOUNCE_FOREVER
            )
        except ValueError as e:
            msg = f"Invalid value announcement '{pair.value}': {e}"
            raise InvalidValueError(msg) from e
        self.announced_ports.append(chosen)

    def _handle_service_install(self, pair: OptionPair) -> None:
        require_no_value(pair)
        self._service().install()
        raise ExitRequested(0)

    def _handle_service_remove(self, pair: OptionPair) -> None:
        require_no_value(pair)
        self._service().remove()
        raise ExitRequested(0)

    def _service(self):
        if self.collaborators.service is None:
            msg = "Service control is not available on this system."
            raise ConfigurationError(msg)
        return self.collaborators.service

    def _handle_bob_gen_keys(self, pair: OptionPair) -> None:
        require_no_value(pair)
        raise ExitRequested(self.collaborators.keys.generate_key_pair())

    def _handle_bob_add_skey(self, pair: OptionPair) -> None:
        value = require_value(pair)
        if not self.collaborators.keys.add_secret_key(value):
            msg = f"Invalid secret key: {value}"
            raise InvalidValueError(msg)

    def _handle_help(self, pair: OptionPair) -> None:
        raise ExitRequested(0, usage_text(self.features))

    def _handle_version(self, pair: OptionPair) -> None:
        raise ExitRequested(0, version_string(self.features))

    def _request_forwarding(self) -> None:
        # Done after the whole stream so a later --fwd-disable still applies
        if not self.features.fwd or self.config.fwd_disable:
            return
        for port in self.announced_ports:
            self.collaborators.fwd.add(port, ANNOUNCE_FOREVER)
