"""Pydantic models for KadNode.

Provides the node configuration record and the feature set it is checked
against.
"""

from __future__ import annotations

import socket
import ssl
import sys
from enum import Enum

from pydantic import BaseModel, Field


class AddressFamily(str, Enum):
    """IP mode of the DHT."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"

    @property
    def socket_family(self) -> socket.AddressFamily:
        """Return the matching socket address family."""
        return socket.AF_INET if self is AddressFamily.IPV4 else socket.AF_INET6

    @property
    def label(self) -> str:
        """Human readable name."""
        return "IPv4" if self is AddressFamily.IPV4 else "IPv6"


class Verbosity(str, Enum):
    """Verbosity levels accepted by --verbosity."""

    QUIET = "quiet"
    VERBOSE = "verbose"
    DEBUG = "debug"


class FeatureSet(BaseModel):
    """Optional subsystems enabled in this build.

    The option catalog and the validator consult this to decide which
    options and fields are active.
    """

    lpd: bool = Field(default=True, description="Local peer discovery via multicast")
    cmd: bool = Field(default=True, description="Remote control interface")
    dns: bool = Field(default=True, description="DNS server / proxy interface")
    nss: bool = Field(default=True, description="Name Service Switch interface")
    web: bool = Field(default=True, description="Web interface")
    tls: bool = Field(default=True, description="TLS client and server support")
    fwd_natpmp: bool = Field(default=True, description="NAT-PMP port forwarding")
    fwd_upnp: bool = Field(default=True, description="UPnP port forwarding")
    bob: bool = Field(default=True, description="Public key based value ownership")
    service: bool = Field(default=False, description="Windows service management")
    debug: bool = Field(default=False, description="Debug build")

    @property
    def fwd(self) -> bool:
        """Whether any port forwarding protocol is available."""
        return self.fwd_natpmp or self.fwd_upnp

    @classmethod
    def detect(cls, debug: bool = False) -> FeatureSet:
        """Resolve the feature set for the running platform."""
        return cls(
            tls=ssl.HAS_SNI,
            service=sys.platform == "win32",
            debug=debug,
        )

    def names(self) -> list[str]:
        """Return the enabled feature names in display order."""
        order = [
            ("lpd", self.lpd),
            ("bob", self.bob),
            ("cmd", self.cmd),
            ("nss", self.nss),
            ("debug", self.debug),
            ("dns", self.dns),
            ("natpmp", self.fwd_natpmp),
            ("upnp", self.fwd_upnp),
            ("tls", self.tls),
            ("web", self.web),
        ]
        return [name for name, enabled in order if enabled]


class SNIEntry(BaseModel):
    """Certificate and key served by the TLS server for one domain."""

    domain: str
    cert_path: str
    key_path: str


class NodeConfig(BaseModel):
    """Configuration record of a running node.

    String fields stay None until set by an option or by the defaulting
    pass. Written only during startup.
    """

    # Identity / runtime
    node_id: str | None = Field(default=None, description="Hex encoded node id")
    family: AddressFamily | None = Field(default=None, description="DHT IP mode")
    is_daemon: bool = Field(default=False, description="Run in background")
    verbosity: Verbosity = Field(default=Verbosity.VERBOSE)
    user: str | None = Field(default=None, description="Switch to this user")
    service_start: bool = Field(default=False, description="Start as Windows service")
    startup_time: float | None = Field(default=None, description="Unix timestamp")

    # Network binding
    dht_port: str | None = Field(default=None, description="DHT bind port")
    dht_addr: str | None = Field(default=None, description="DHT bind address")
    dht_ifname: str | None = Field(default=None, description="Bind interface")
    query_tld: str | None = Field(default=None, description="Handled domain suffix")

    # Local peer discovery
    lpd_addr: str | None = Field(default=None, description="LPD multicast address")
    lpd_disable: bool = Field(default=False)
    lpd_address: tuple[str, int] | None = Field(
        default=None,
        description="Resolved LPD multicast address and port",
    )

    # Remote control
    cmd_port: str | None = Field(default=None)
    cmd_disable_stdin: bool = Field(default=False)

    # DNS
    dns_port: str | None = Field(default=None)
    dns_server: str | None = Field(default=None, description="Upstream DNS server")
    dns_server_address: tuple[str, int] | None = Field(
        default=None,
        description="Resolved upstream DNS server address and port",
    )

    # NSS / web
    nss_port: str | None = Field(default=None)
    web_port: str | None = Field(default=None)

    # Port forwarding
    fwd_disable: bool = Field(default=False)

    # Files
    pidfile: str | None = Field(default=None)
    peerfile: str | None = Field(default=None)
    configfile: str | None = Field(default=None, description="Loaded config file")

    @classmethod
    def create(cls, features: FeatureSet) -> NodeConfig:
        """Create an empty record with the build's default verbosity."""
        verbosity = Verbosity.DEBUG if features.debug else Verbosity.VERBOSE
        return cls(verbosity=verbosity)
