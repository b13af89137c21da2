"""Built-in default values."""

from __future__ import annotations

from typing import Final

QUERY_TLD_DEFAULT: Final[str] = "p2p"

DHT_PORT: Final[str] = "6881"
DHT_ADDR4: Final[str] = "0.0.0.0"
DHT_ADDR6: Final[str] = "::"

# BitTorrent local peer discovery groups
LPD_ADDR4: Final[str] = "239.192.152.143"
LPD_ADDR6: Final[str] = "ff15::efc0:988f"
LPD_PORT: Final[int] = 6771

CMD_PORT: Final[str] = "1700"
DNS_PORT: Final[str] = "3535"
DNS_SERVER_PORT: Final[int] = 53
NSS_PORT: Final[str] = "4053"
WEB_PORT: Final[str] = "8053"

# SHA1 sized node identifiers
NODE_ID_LENGTH: Final[int] = 20

# Maximum width of each field of a TLS server entry
TLS_FIELD_MAX: Final[int] = 127

# Lifetime handed to collaborators for values announced until shutdown
ANNOUNCE_FOREVER: Final[float] = float("inf")
