"""Value parsers for option arguments.

Pure functions that validate and convert raw option values. All of them
raise InvalidValueError on bad input.
"""

from __future__ import annotations

import ipaddress
import re
import socket

from kadnode.config.defaults import TLS_FIELD_MAX
from kadnode.exceptions import InvalidValueError
from kadnode.models import AddressFamily, SNIEntry

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_PORT_RE = re.compile(r"[0-9]+")

PORT_MAX = 65535


def parse_port(value: str, allow_zero: bool = False) -> int:
    """Parse a decimal port number.

    Args:
        value: Raw port string
        allow_zero: Accept 0 (ephemeral / disabled) as well

    Returns:
        The port as int

    Raises:
        InvalidValueError: If the value is not a number in range

    """
    if not _PORT_RE.fullmatch(value):
        msg = f"Invalid port: '{value}'"
        raise InvalidValueError(msg)
    port = int(value)
    lowest = 0 if allow_zero else 1
    if port < lowest or port > PORT_MAX:
        msg = f"Port out of range: '{value}'"
        raise InvalidValueError(msg)
    return port


def split_host_port(value: str) -> tuple[str, str | None]:
    """Split "<host>", "<host>:<port>" or "[<host>]:<port>".

    A bare IPv6 address (more than one ':') is returned as host only.
    """
    if value.startswith("["):
        end = value.find("]")
        if end < 0:
            msg = f"Invalid address: '{value}'"
            raise InvalidValueError(msg)
        host = value[1:end]
        rest = value[end + 1 :]
        if rest == "":
            return host, None
        if not rest.startswith(":"):
            msg = f"Invalid address: '{value}'"
            raise InvalidValueError(msg)
        return host, rest[1:]

    if value.count(":") == 1:
        host, _, port = value.partition(":")
        return host, port

    return value, None


def parse_address(
    value: str,
    default_port: int,
    family: AddressFamily | None = None,
) -> tuple[IPAddress, int]:
    """Parse and resolve an address with optional port.

    Literal IP addresses are parsed directly; anything else is resolved
    through the system resolver.

    Args:
        value: Address text
        default_port: Port used when the text carries none
        family: Required address family, or None for any

    Returns:
        Tuple of (ip_address, port)

    Raises:
        InvalidValueError: If the address cannot be parsed or resolved

    """
    host, port_text = split_host_port(value)
    port = default_port if port_text is None else parse_port(port_text, allow_zero=True)

    if not host:
        msg = f"Failed to parse IP address '{value}'."
        raise InvalidValueError(msg)

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        ip = _resolve(host, port, family, value)

    if family is not None and ip.version != (4 if family is AddressFamily.IPV4 else 6):
        msg = f"Failed to parse IP address '{value}': {family.label} address expected."
        raise InvalidValueError(msg)

    return ip, port


def _resolve(
    host: str, port: int, family: AddressFamily | None, original: str
) -> IPAddress:
    af = family.socket_family if family is not None else socket.AF_UNSPEC
    try:
        infos = socket.getaddrinfo(host, port, af, socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        msg = f"Failed to parse IP address '{original}'."
        raise InvalidValueError(msg, {"error": str(e)}) from e
    if not infos:
        msg = f"Failed to parse IP address '{original}'."
        raise InvalidValueError(msg)
    sockaddr = infos[0][4]
    # IPv6 scope ids come back as "fe80::1%eth0"
    return ipaddress.ip_address(str(sockaddr[0]).split("%", 1)[0])


def is_multicast(ip: IPAddress) -> bool:
    """Check the leading octet against the multicast class of its family.

    IPv4 accepts 224.x.x.x and 239.x.x.x, IPv6 accepts ff00::/8.
    """
    octet = ip.packed[0]
    if ip.version == 4:
        return octet in (224, 239)
    return octet == 0xFF


def format_address(ip: IPAddress, port: int) -> str:
    """Format an address the way it is shown in diagnostics."""
    if ip.version == 6:
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"


def parse_tls_server_entry(value: str) -> SNIEntry:
    """Parse "<domain>,<certificate>,<key>".

    Raises:
        InvalidValueError: On a wrong field count, an empty field or a
            field wider than TLS_FIELD_MAX characters

    """
    fields = value.split(",")
    if len(fields) != 3 or any(
        not field or len(field) > TLS_FIELD_MAX for field in fields
    ):
        msg = f"Invalid option format: {value}"
        raise InvalidValueError(msg)
    domain, cert_path, key_path = fields
    return SNIEntry(domain=domain, cert_path=cert_path, key_path=key_path)


def parse_value_id(value: str) -> tuple[str, int]:
    """Parse "<id>[:<port>]" for value announcements.

    Splits on the last ':'. Without a port, 0 is returned and the DHT
    picks one.

    Returns:
        Tuple of (identifier, port)

    """
    identifier, sep, port_text = value.rpartition(":")
    if not sep:
        identifier, port = value, 0
    else:
        try:
            port = parse_port(port_text)
        except InvalidValueError as e:
            msg = f"Invalid port for value announcement: '{port_text}'"
            raise InvalidValueError(msg) from e

    if not identifier:
        msg = f"Invalid value identifier: '{value}'"
        raise InvalidValueError(msg)
    return identifier, port
