"""Option catalog.

Maps option names to symbolic codes. Options of features missing from the
active FeatureSet resolve to OptionCode.UNKNOWN so they are reported as
unknown instead of being silently ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kadnode.models import FeatureSet


class OptionCode(Enum):
    """Symbolic option codes."""

    QUERY_TLD = "query_tld"
    PID_FILE = "pid_file"
    PEER_FILE = "peer_file"
    PEER = "peer"
    VERBOSITY = "verbosity"
    CMD_DISABLE_STDIN = "cmd_disable_stdin"
    CMD_PORT = "cmd_port"
    DNS_PORT = "dns_port"
    DNS_SERVER = "dns_server"
    NSS_PORT = "nss_port"
    TLS_CLIENT_ENTRY = "tls_client_entry"
    TLS_SERVER_ENTRY = "tls_server_entry"
    WEB_PORT = "web_port"
    CONFIG = "config"
    MODE = "mode"
    PORT = "port"
    ADDR = "addr"
    LPD_ADDR = "lpd_addr"
    LPD_DISABLE = "lpd_disable"
    FWD_DISABLE = "fwd_disable"
    SERVICE_INSTALL = "service_install"
    SERVICE_REMOVE = "service_remove"
    SERVICE_START = "service_start"
    BOB_GEN_KEYS = "bob_gen_keys"
    BOB_ADD_SKEY = "bob_add_skey"
    VALUE_ID = "value_id"
    IFNAME = "ifname"
    USER = "user"
    DAEMON = "daemon"
    HELP = "help"
    VERSION = "version"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OptionDescriptor:
    """One catalog entry.

    ``feature`` names the FeatureSet attribute that must be true for the
    option to exist; None means always available.
    """

    name: str
    code: OptionCode
    feature: str | None = None

    def is_enabled(self, features: FeatureSet) -> bool:
        """Check whether this option exists in the given build."""
        if self.feature is None:
            return True
        return bool(getattr(features, self.feature))


OPTIONS: tuple[OptionDescriptor, ...] = (
    OptionDescriptor("--query-tld", OptionCode.QUERY_TLD),
    OptionDescriptor("--pidfile", OptionCode.PID_FILE),
    OptionDescriptor("--peerfile", OptionCode.PEER_FILE),
    OptionDescriptor("--peer", OptionCode.PEER),
    OptionDescriptor("--verbosity", OptionCode.VERBOSITY),
    OptionDescriptor("--cmd-disable-stdin", OptionCode.CMD_DISABLE_STDIN, "cmd"),
    OptionDescriptor("--cmd-port", OptionCode.CMD_PORT, "cmd"),
    OptionDescriptor("--dns-port", OptionCode.DNS_PORT, "dns"),
    OptionDescriptor("--dns-server", OptionCode.DNS_SERVER, "dns"),
    OptionDescriptor("--nss-port", OptionCode.NSS_PORT, "nss"),
    OptionDescriptor("--tls-client-entry", OptionCode.TLS_CLIENT_ENTRY, "tls"),
    OptionDescriptor("--tls-server-entry", OptionCode.TLS_SERVER_ENTRY, "tls"),
    OptionDescriptor("--web-port", OptionCode.WEB_PORT, "web"),
    OptionDescriptor("--config", OptionCode.CONFIG),
    OptionDescriptor("--mode", OptionCode.MODE),
    OptionDescriptor("--port", OptionCode.PORT),
    OptionDescriptor("--addr", OptionCode.ADDR),
    OptionDescriptor("--lpd-addr", OptionCode.LPD_ADDR, "lpd"),
    OptionDescriptor("--lpd-disable", OptionCode.LPD_DISABLE, "lpd"),
    OptionDescriptor("--fwd-disable", OptionCode.FWD_DISABLE, "fwd"),
    OptionDescriptor("--service-install", OptionCode.SERVICE_INSTALL, "service"),
    OptionDescriptor("--service-remove", OptionCode.SERVICE_REMOVE, "service"),
    OptionDescriptor("--service-start", OptionCode.SERVICE_START, "service"),
    OptionDescriptor("--bob-gen-keys", OptionCode.BOB_GEN_KEYS, "bob"),
    OptionDescriptor("--bob-add-skey", OptionCode.BOB_ADD_SKEY, "bob"),
    OptionDescriptor("--value-id", OptionCode.VALUE_ID),
    OptionDescriptor("--ifname", OptionCode.IFNAME),
    OptionDescriptor("--user", OptionCode.USER),
    OptionDescriptor("--daemon", OptionCode.DAEMON),
    OptionDescriptor("-h", OptionCode.HELP),
    OptionDescriptor("--help", OptionCode.HELP),
    OptionDescriptor("-v", OptionCode.VERSION),
    OptionDescriptor("--version", OptionCode.VERSION),
)


def find_code(name: str, features: FeatureSet) -> OptionCode:
    """Resolve an option name to its code.

    Args:
        name: Option token, e.g. "--port"
        features: Active feature set

    Returns:
        The option's code or OptionCode.UNKNOWN

    """
    for descriptor in OPTIONS:
        if descriptor.name == name:
            if descriptor.is_enabled(features):
                return descriptor.code
            return OptionCode.UNKNOWN
    return OptionCode.UNKNOWN


def active_options(features: FeatureSet) -> list[OptionDescriptor]:
    """Return the catalog entries available in this build."""
    return [d for d in OPTIONS if d.is_enabled(features)]
