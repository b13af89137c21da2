"""Tests for the in-memory collaborators."""

from __future__ import annotations

import math

import pytest

from kadnode.collaborators import (
    EPHEMERAL_PORT_MAX,
    EPHEMERAL_PORT_MIN,
    AnnouncementTable,
    CertificateStore,
    ForwardingTable,
    KeyRing,
    PeerQueue,
)

pytestmark = [pytest.mark.unit]


class TestAnnouncementTable:
    """DHT announcement recording."""

    def test_explicit_port(self):
        """An explicit port is used as is."""
        table = AnnouncementTable()
        assert table.announce("foo", 1234, math.inf) == 1234
        assert table.announcements[0].identifier == "foo"
        assert table.announcements[0].lifetime == math.inf

    def test_ephemeral_port(self):
        """Port 0 picks a port from the ephemeral range."""
        port = AnnouncementTable().announce("foo", 0, math.inf)
        assert EPHEMERAL_PORT_MIN <= port <= EPHEMERAL_PORT_MAX

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_rejects_bad_port(self, port):
        """Out of range ports raise ValueError."""
        with pytest.raises(ValueError):
            AnnouncementTable().announce("foo", port, math.inf)


def test_forwarding_table():
    """Requests are recorded in order."""
    table = ForwardingTable()
    table.add(6881, math.inf)
    table.add(8080, 60.0)
    assert [(r.port, r.lifetime) for r in table.requests] == [(6881, math.inf), (8080, 60.0)]


def test_peer_queue():
    """Peers are queued in order."""
    queue = PeerQueue()
    queue.add_peer("a")
    queue.add_peer("b")
    assert queue.peers == ["a", "b"]


class TestCertificateStore:
    """CA and SNI entries."""

    def test_existing_ca_path(self, tmp_path):
        """Existing files and directories are accepted."""
        store = CertificateStore()
        assert store.add_ca_entry(str(tmp_path))
        assert store.ca_entries == [str(tmp_path)]

    def test_missing_ca_path(self, tmp_path):
        """Missing paths are refused."""
        assert not CertificateStore().add_ca_entry(str(tmp_path / "missing.pem"))

    def test_sni_entry(self):
        """SNI entries are recorded."""
        store = CertificateStore()
        store.add_sni_entry("a.p2p", "a.crt", "a.key")
        assert store.sni_entries[0].key_path == "a.key"


class TestKeyRing:
    """Secret key handling."""

    def test_generate_key_pair(self, capsys):
        """A key pair is printed as hex."""
        assert KeyRing().generate_key_pair() == 0
        out = capsys.readouterr().out
        assert "public key: " in out
        assert "secret key: " in out

    def test_add_secret_key(self):
        """A valid key derives a public key."""
        ring = KeyRing()
        assert ring.add_secret_key("1f" * 16)
        [public] = ring.public_keys()
        assert len(public) == 64

    @pytest.mark.parametrize("key", ["zz", "", "0"])
    def test_invalid_secret_key(self, key):
        """Non-hex and zero keys are refused."""
        assert not KeyRing().add_secret_key(key)
