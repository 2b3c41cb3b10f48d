"""Raw ICMPv4 socket shared by every probe of a sweep."""

import errno
import logging
import select
import socket
import time

from ..core.exceptions import PermissionError, TimeoutError, TransportError

logger = logging.getLogger(__name__)

LISTEN_ADDRESS = "0.0.0.0"


class Transport:
    """Owns one raw ICMP endpoint.

    Only a single thread should call ``receive_before``; the deadline is
    passed per call rather than stored on the socket.
    """

    def __init__(self, sock: socket.socket, receive_buffer: int = 1500):
        self._sock = sock
        self._receive_buffer = receive_buffer
        self._closed = False

    @classmethod
    def open(cls, receive_buffer: int = 1500) -> "Transport":
        """Bind a wildcard raw ICMP listen endpoint."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
        except OSError as e:
            if e.errno in (errno.EPERM, errno.EACCES):
                raise PermissionError(
                    "raw ICMP socket",
                    "couldn't start listening for packets. Are you root?",
                ) from e
            raise TransportError("Couldn't open raw ICMP socket", str(e)) from e

        try:
            sock.bind((LISTEN_ADDRESS, 0))
        except OSError as e:
            sock.close()
            raise TransportError(f"Couldn't bind raw ICMP socket to {LISTEN_ADDRESS}", str(e)) from e

        sock.setblocking(False)
        logger.debug("Listening for ICMP on %s", LISTEN_ADDRESS)
        return cls(sock, receive_buffer=receive_buffer)

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, payload: bytes, destination: str) -> None:
        """Write one datagram to destination. Failures are not retried."""
        if self._closed:
            raise TransportError(f"Transport closed, cannot send to {destination}")
        try:
            self._sock.sendto(payload, (destination, 0))
        except OSError as e:
            raise TransportError(f"Error whilst sending echo message to {destination}", str(e)) from e

    def receive_before(self, deadline: float) -> tuple[bytes, str]:
        """
        Block until a datagram arrives or the deadline passes.

        Args:
            deadline: Absolute ``time.monotonic()`` value

        Returns:
            Tuple of (datagram bytes, source address string)
        """
        if self._closed:
            raise TransportError("Transport closed, cannot receive")

        window = round(max(deadline - time.monotonic(), 0.0), 3)
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("ICMP receive", window)

            try:
                ready, _, _ = select.select([self._sock], [], [], remaining)
            except (OSError, ValueError) as e:
                raise TransportError("Couldn't receive response", str(e)) from e

            if not ready:
                raise TimeoutError("ICMP receive", window)

            try:
                data, address = self._sock.recvfrom(self._receive_buffer)
            except BlockingIOError:
                # Readable but drained by the kernel in between; wait again.
                continue
            except OSError as e:
                raise TransportError("Couldn't receive response", str(e)) from e

            return data, address[0]

    def close(self) -> None:
        """Release the endpoint. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        logger.debug("Raw ICMP socket closed")
