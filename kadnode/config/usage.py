"""Help text for the option catalog."""

from __future__ import annotations

from kadnode.config import defaults
from kadnode.models import FeatureSet

HEADER = (
    "KadNode - A P2P name resolution daemon.\n"
    "A Wrapper for the Kademlia implementation of a Distributed Hash Table (DHT)\n"
    "with several optional interfaces (use --version).\n"
    "\n"
    "Usage: kadnode [OPTIONS]*\n"
)

# (feature, [(option synopsis, description lines)])
SECTIONS: list[tuple[str | None, list[tuple[str, list[str]]]]] = [
    (
        None,
        [
            (
                "--value-id <id>[:<port>]",
                [
                    "Add a value/domain to be announced every 30 minutes.",
                    "This option may occur multiple times.",
                ],
            ),
            ("--peerfile <file>", ["Import/Export peers from and to a file."]),
            (
                "--peer <addr>",
                ["Add a static peer address.", "This option may occur multiple times."],
            ),
            ("--user <user>", ["Change the UUID after start."]),
            ("--port <port>", ["Bind DHT to this port.", f"Default: {defaults.DHT_PORT}"]),
            (
                "--addr <addr>",
                [
                    "Bind DHT to this address.",
                    f"Default: {defaults.DHT_ADDR4} / {defaults.DHT_ADDR6}",
                ],
            ),
            (
                "--config <file>",
                [
                    "Provide a configuration file with one command line",
                    "option on each line. Comments start after '#'.",
                ],
            ),
            ("--ifname <interface>", ["Bind to this interface.", "Default: <any>"]),
            ("--daemon", ["Run the node in background."]),
            (
                "--verbosity <level>",
                ["Verbosity level: quiet, verbose or debug.", "Default: verbose"],
            ),
            ("--pidfile <file>", ["Write process pid to a file."]),
            (
                "--mode <ipv4|ipv6>",
                ["Enable IPv4 or IPv6 mode for the DHT.", "Default: ipv4"],
            ),
            (
                "--query-tld <domain>",
                [
                    "Top level domain to be handled by KadNode.",
                    f"Default: {defaults.QUERY_TLD_DEFAULT}",
                ],
            ),
        ],
    ),
    (
        "lpd",
        [
            (
                "--lpd-addr <addr>",
                [
                    "Set multicast address for Local Peer Discovery.",
                    f"Default: {defaults.LPD_ADDR4} / {defaults.LPD_ADDR6}",
                ],
            ),
            ("--lpd-disable", ["Disable multicast to discover local peers."]),
        ],
    ),
    (
        "bob",
        [
            ("--bob-gen-keys", ["Generate a new public/secret key pair and exit."]),
            (
                "--bob-add-skey <key>",
                [
                    "Add a secret key. The derived public key will be announced.",
                    "The secret key will be used to prove that you have it.",
                ],
            ),
        ],
    ),
    (
        "cmd",
        [
            ("--cmd-disable-stdin", ["Disable the local control interface."]),
            (
                "--cmd-port <port>",
                [
                    "Bind the remote control interface to this local port.",
                    f"Default: {defaults.CMD_PORT}",
                ],
            ),
        ],
    ),
    (
        "dns",
        [
            (
                "--dns-port <port>",
                [
                    "Bind the DNS server interface to this local port.",
                    f"Default: {defaults.DNS_PORT}",
                ],
            ),
            (
                "--dns-server <ip_addr>",
                [
                    "IP address of an external DNS server. Enables DNS proxy mode.",
                    "Default: none",
                ],
            ),
        ],
    ),
    (
        "nss",
        [
            (
                "--nss-port <port>",
                [
                    "Bind the Network Service Switch to this local port.",
                    f"Default: {defaults.NSS_PORT}",
                ],
            ),
        ],
    ),
    (
        "web",
        [
            (
                "--web-port <port>",
                [
                    "Bind the web server to this local port.",
                    f"Default: {defaults.WEB_PORT}",
                ],
            ),
        ],
    ),
    (
        "fwd",
        [("--fwd-disable", ["Disable UPnP/NAT-PMP to forward router ports."])],
    ),
    (
        "tls",
        [
            (
                "--tls-client-entry <path>",
                ["Path to file or folder of CA certificates for TLS client."],
            ),
            (
                "--tls-server-entry <entry>",
                [
                    "Comma separated triples of domain, certificate and key for TLS server.",
                    "Example: kadnode.p2p,kadnode.crt,kadnode.key",
                ],
            ),
        ],
    ),
    (
        "service",
        [
            ("--service-start", ["Run KadNode under the Windows Service Control Manager."]),
            (
                "--service-install",
                [
                    "Install KadNode as Windows service. It will be started/shut down",
                    "along with Windows or on request by the Service Control Manager.",
                ],
            ),
            ("--service-remove", ["Remove the KadNode Windows service."]),
        ],
    ),
    (
        None,
        [
            ("-h, --help", ["Print this help."]),
            ("-v, --version", ["Print program version."]),
        ],
    ),
]

_COLUMN = 32


def usage_text(features: FeatureSet) -> str:
    """Build the help text for the enabled features."""
    lines = [HEADER]
    for feature, entries in SECTIONS:
        if feature is not None and not getattr(features, feature):
            continue
        for synopsis, description in entries:
            first, *rest = description
            lines.append(f" {synopsis:<{_COLUMN - 1}}{first}")
            lines.extend(f"{'':<{_COLUMN}}{text}" for text in rest)
            lines.append("")
    return "\n".join(lines).rstrip("\n")
