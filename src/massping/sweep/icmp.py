"""ICMPv4 echo marshalling and parsing using Scapy."""

from dataclasses import dataclass

from scapy.all import ICMP, IP, conf

from ..core.exceptions import ValidationError

ICMP_ECHO_REPLY = 0
ICMP_ECHO_REQUEST = 8

MAX_FIELD = 0x7FFF  # identifiers and sequences are drawn from [0, 32767]

conf.verb = 0


@dataclass(frozen=True)
class EchoMessage:
    """An ICMP message read off the wire."""

    type: int
    code: int
    identifier: int | None
    sequence: int | None

    @property
    def is_echo_reply(self) -> bool:
        return self.type == ICMP_ECHO_REPLY and self.code == 0

    @property
    def is_echo_request(self) -> bool:
        return self.type == ICMP_ECHO_REQUEST

    @property
    def token(self) -> tuple[int, int] | None:
        if self.identifier is None or self.sequence is None:
            return None
        return (self.identifier, self.sequence)


def build_echo_request(identifier: int, sequence: int) -> bytes:
    """
    Marshal an echo request with an empty payload.

    Args:
        identifier: 16-bit echo identifier
        sequence: 16-bit echo sequence number

    Returns:
        ICMP header bytes with the checksum filled in
    """
    for name, value in (("identifier", identifier), ("sequence", sequence)):
        if not 0 <= value <= 0xFFFF:
            raise ValidationError(f"Echo {name} out of range: {value}")

    return bytes(ICMP(type=ICMP_ECHO_REQUEST, code=0, id=identifier, seq=sequence))


def parse_message(data: bytes) -> EchoMessage:
    """
    Parse a datagram received on a raw ICMP socket.

    Linux delivers the IPv4 header in front of the ICMP message; platforms
    that strip it are handled by looking at the version nibble.
    """
    if not data:
        raise ValidationError("Empty datagram")

    if data[0] >> 4 == 4:
        packet = IP(data)
        if not packet.haslayer(ICMP):
            raise ValidationError("Datagram carries no ICMP message", f"proto={packet.proto}")
        icmp = packet[ICMP]
    else:
        if len(data) < 8:
            raise ValidationError("Truncated ICMP message", f"{len(data)} bytes")
        icmp = ICMP(data)

    identifier = sequence = None
    if icmp.type in (ICMP_ECHO_REPLY, ICMP_ECHO_REQUEST):
        identifier = int(icmp.id)
        sequence = int(icmp.seq)

    return EchoMessage(
        type=int(icmp.type),
        code=int(icmp.code),
        identifier=identifier,
        sequence=sequence,
    )
