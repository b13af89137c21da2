"""Tests for option value parsers."""

from __future__ import annotations

import ipaddress
import re
import socket

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kadnode.config import parsers
from kadnode.config.parsers import (
    format_address,
    is_multicast,
    parse_address,
    parse_port,
    parse_tls_server_entry,
    parse_value_id,
    split_host_port,
)
from kadnode.exceptions import InvalidValueError
from kadnode.models import AddressFamily

pytestmark = [pytest.mark.unit, pytest.mark.config]


class TestParsePortProperties:
    """Property-based tests for port parsing."""

    @pytest.mark.property
    @given(st.integers(min_value=1, max_value=65535))
    def test_accepts_valid_range(self, port):
        """Every port in 1..65535 is accepted."""
        assert parse_port(str(port)) == port

    @pytest.mark.property
    @given(st.integers().filter(lambda n: n < 1 or n > 65535))
    def test_rejects_out_of_range(self, port):
        """Numbers outside 1..65535 are rejected."""
        with pytest.raises(InvalidValueError):
            parse_port(str(port))

    @pytest.mark.property
    @given(st.text().filter(lambda s: re.fullmatch(r"[0-9]+", s) is None))
    def test_rejects_non_numeric(self, text):
        """Anything that is not plain decimal digits is rejected."""
        with pytest.raises(InvalidValueError):
            parse_port(text)


class TestParsePort:
    """Port parsing edge cases."""

    def test_zero_needs_allow_zero(self):
        """0 is only valid where the field allows it."""
        with pytest.raises(InvalidValueError):
            parse_port("0")
        assert parse_port("0", allow_zero=True) == 0

    @pytest.mark.parametrize("value", ["", " 80", "80 ", "+80", "0x50", "8.0"])
    def test_rejects_malformed(self, value):
        """Whitespace, signs and other bases are rejected."""
        with pytest.raises(InvalidValueError):
            parse_port(value)


class TestAddresses:
    """Address splitting and parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.2.3.4", ("1.2.3.4", None)),
            ("1.2.3.4:53", ("1.2.3.4", "53")),
            ("::1", ("::1", None)),
            ("[::1]", ("::1", None)),
            ("[::1]:5353", ("::1", "5353")),
            ("example.com:53", ("example.com", "53")),
        ],
    )
    def test_split_host_port(self, value, expected):
        """Host and port are separated for every accepted form."""
        assert split_host_port(value) == expected

    @pytest.mark.parametrize("value", ["[::1", "[::1]53"])
    def test_split_host_port_rejects_broken_brackets(self, value):
        """Unbalanced or unseparated brackets are rejected."""
        with pytest.raises(InvalidValueError):
            split_host_port(value)

    def test_parse_literal_with_default_port(self):
        """Literal addresses use the default port when none is given."""
        ip, port = parse_address("8.8.8.8", 53)
        assert ip == ipaddress.ip_address("8.8.8.8")
        assert port == 53

    def test_parse_literal_with_port(self):
        """An explicit port wins over the default."""
        ip, port = parse_address("[2001:db8::1]:5353", 53)
        assert ip == ipaddress.ip_address("2001:db8::1")
        assert port == 5353

    def test_family_mismatch(self):
        """An address of the other family is rejected."""
        with pytest.raises(InvalidValueError):
            parse_address("ff02::1", 6771, AddressFamily.IPV4)
        with pytest.raises(InvalidValueError):
            parse_address("239.1.1.1", 6771, AddressFamily.IPV6)

    def test_unresolvable_name(self, monkeypatch):
        """Resolver failures become InvalidValueError."""

        def fail(*args, **kwargs):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

        monkeypatch.setattr(parsers.socket, "getaddrinfo", fail)
        with pytest.raises(InvalidValueError, match="no.such.host"):
            parse_address("no.such.host", 53)

    def test_resolved_name(self, monkeypatch):
        """Names are resolved through getaddrinfo."""

        def resolve(host, port, family, type_):
            return [(socket.AF_INET, socket.SOCK_DGRAM, 17, "", ("10.1.2.3", port))]

        monkeypatch.setattr(parsers.socket, "getaddrinfo", resolve)
        ip, port = parse_address("dns.lan", 53)
        assert str(ip) == "10.1.2.3"
        assert port == 53

    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            ("224.0.0.1", True),
            ("239.192.152.143", True),
            ("230.1.1.1", False),
            ("10.0.0.1", False),
            ("ff15::efc0:988f", True),
            ("fe80::1", False),
        ],
    )
    def test_is_multicast(self, address, expected):
        """Only 224/239 (IPv4) and ff00::/8 (IPv6) are accepted."""
        assert is_multicast(ipaddress.ip_address(address)) is expected

    def test_format_address(self):
        """IPv6 addresses are bracketed."""
        assert format_address(ipaddress.ip_address("10.0.0.1"), 6771) == "10.0.0.1:6771"
        assert format_address(ipaddress.ip_address("ff15::1"), 6771) == "[ff15::1]:6771"


class TestTLSServerEntry:
    """Parsing of domain,certificate,key triples."""

    def test_valid_triple(self):
        """Three fields produce one entry."""
        entry = parse_tls_server_entry("example.p2p,cert.pem,key.pem")
        assert entry.domain == "example.p2p"
        assert entry.cert_path == "cert.pem"
        assert entry.key_path == "key.pem"

    @pytest.mark.parametrize(
        "value",
        [
            "example.p2p,cert.pem",
            "example.p2p,cert.pem,key.pem,extra",
            "example.p2p,,key.pem",
            "",
            "x" * 128 + ",cert.pem,key.pem",
        ],
    )
    def test_malformed(self, value):
        """Wrong field counts, empty and oversized fields are rejected."""
        with pytest.raises(InvalidValueError):
            parse_tls_server_entry(value)

    def test_field_width_limit(self):
        """127 characters per field are allowed."""
        entry = parse_tls_server_entry("x" * 127 + ",c,k")
        assert len(entry.domain) == 127


class TestValueId:
    """Parsing of <id>[:<port>]."""

    def test_with_port(self):
        """A port suffix is split off."""
        assert parse_value_id("foo:1234") == ("foo", 1234)

    def test_without_port(self):
        """Without a port the DHT chooses one."""
        assert parse_value_id("foo.p2p") == ("foo.p2p", 0)

    def test_splits_on_last_colon(self):
        """Only the last ':' separates the port."""
        assert parse_value_id("a:b:80") == ("a:b", 80)

    @pytest.mark.parametrize("value", ["foo:", "foo:0", "foo:65536", "foo:http", ":80"])
    def test_invalid(self, value):
        """Bad ports and empty identifiers are rejected."""
        with pytest.raises(InvalidValueError):
            parse_value_id(value)
