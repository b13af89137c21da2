"""Subsystems the configuration loader talks to.

The loader only needs a narrow slice of the DHT, port forwarding, TLS, peer
file, key and service subsystems. Each slice is a Protocol; the in-memory
implementations below record requests so the startup routine can hand them
over once the subsystems are running.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import click
from cryptography.hazmat.primitives.asymmetric import ec

from kadnode.models import SNIEntry
from kadnode.utils.logging_config import get_logger

logger = get_logger(__name__)

# Range used when a value is announced without a port
EPHEMERAL_PORT_MIN = 49152
EPHEMERAL_PORT_MAX = 65535


class Announcer(Protocol):
    """DHT side of --value-id."""

    def announce(self, identifier: str, port: int, lifetime: float) -> int:
        """Announce a value; return the port actually used.

        Raises ValueError when the identifier or port is rejected.
        """
        ...


class PortForwarder(Protocol):
    """Router port mapping requests."""

    def add(self, port: int, lifetime: float) -> None:
        """Request a mapping for ``port``."""
        ...


class TLSRegistry(Protocol):
    """TLS client CA entries and server SNI entries."""

    def add_ca_entry(self, path: str) -> bool:
        """Register a CA file or directory; False when unusable."""
        ...

    def add_sni_entry(self, domain: str, cert_path: str, key_path: str) -> None:
        """Register certificate and key for a domain."""
        ...


class PeerSink(Protocol):
    """Static peers queued for the DHT bootstrap."""

    def add_peer(self, address: str) -> None:
        """Queue a raw peer address."""
        ...


class KeyAuthority(Protocol):
    """Secret keys proving ownership of announced values."""

    def generate_key_pair(self) -> int:
        """Print a new key pair; return the process exit status."""
        ...

    def add_secret_key(self, key: str) -> bool:
        """Register a hex encoded secret key; False when invalid."""
        ...


class ServiceControl(Protocol):
    """Operating system service registration."""

    def install(self) -> None:
        """Register the daemon as a service."""
        ...

    def remove(self) -> None:
        """Unregister the service."""
        ...


@dataclass
class Announcement:
    """A value announced in the DHT."""

    identifier: str
    port: int
    lifetime: float
    created_at: float = field(default_factory=time.time)


class AnnouncementTable:
    """Records value announcements until the DHT takes them over."""

    def __init__(self) -> None:
        """Initialize an empty table."""
        self.announcements: list[Announcement] = []

    def announce(self, identifier: str, port: int, lifetime: float) -> int:
        """Record an announcement, picking a port when none was given."""
        if port < 0 or port > EPHEMERAL_PORT_MAX:
            msg = f"Invalid port for value announcement: {port}"
            raise ValueError(msg)
        if port == 0:
            port = random.randint(EPHEMERAL_PORT_MIN, EPHEMERAL_PORT_MAX)
        self.announcements.append(Announcement(identifier, port, lifetime))
        logger.debug("Announce %s on port %d", identifier, port)
        return port


@dataclass
class ForwardingRequest:
    """Port mapping to request from the router."""

    port: int
    lifetime: float


class ForwardingTable:
    """Records port forwarding requests."""

    def __init__(self) -> None:
        """Initialize an empty table."""
        self.requests: list[ForwardingRequest] = []

    def add(self, port: int, lifetime: float) -> None:
        """Record a mapping request."""
        self.requests.append(ForwardingRequest(port, lifetime))
        logger.debug("Forward port %d", port)


class CertificateStore:
    """Records TLS CA paths and SNI entries."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.ca_entries: list[str] = []
        self.sni_entries: list[SNIEntry] = []

    def add_ca_entry(self, path: str) -> bool:
        """Accept an existing CA file or directory."""
        if not Path(path).exists():
            logger.error("CFG: CA file or folder not found: %s", path)
            return False
        self.ca_entries.append(path)
        return True

    def add_sni_entry(self, domain: str, cert_path: str, key_path: str) -> None:
        """Record an SNI entry."""
        self.sni_entries.append(
            SNIEntry(domain=domain, cert_path=cert_path, key_path=key_path)
        )


class PeerQueue:
    """Collects static peer addresses."""

    def __init__(self) -> None:
        """Initialize an empty queue."""
        self.peers: list[str] = []

    def add_peer(self, address: str) -> None:
        """Queue a peer address."""
        self.peers.append(address)


class KeyRing:
    """Secret keys on the NIST P-256 curve."""

    def __init__(self) -> None:
        """Initialize an empty key ring."""
        self.keys: list[ec.EllipticCurvePrivateKey] = []

    def generate_key_pair(self) -> int:
        """Print a fresh secret/public key pair as hex."""
        key = ec.generate_private_key(ec.SECP256R1())
        secret = key.private_numbers().private_value.to_bytes(32, "big").hex()
        public = key.public_key().public_numbers().x.to_bytes(32, "big").hex()
        click.echo(f"public key: {public}")
        click.echo(f"secret key: {secret}")
        return 0

    def add_secret_key(self, key: str) -> bool:
        """Register a hex encoded secret key."""
        try:
            value = int(key, 16)
            private = ec.derive_private_key(value, ec.SECP256R1())
        except ValueError:
            return False
        self.keys.append(private)
        return True

    def public_keys(self) -> list[str]:
        """Public keys announced for the registered secret keys."""
        return [
            k.public_key().public_numbers().x.to_bytes(32, "big").hex()
            for k in self.keys
        ]


@dataclass
class Collaborators:
    """Everything the dispatcher may delegate to."""

    dht: Announcer = field(default_factory=AnnouncementTable)
    fwd: PortForwarder = field(default_factory=ForwardingTable)
    tls: TLSRegistry = field(default_factory=CertificateStore)
    peers: PeerSink = field(default_factory=PeerQueue)
    keys: KeyAuthority = field(default_factory=KeyRing)
    service: ServiceControl | None = None
