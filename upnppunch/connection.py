from collections import namedtuple
from enum import Enum

from .const import TCP_CHUNK_SIZE
from .errors import ResolutionFailed, ResourceExhausted, TransportFailed
from .util import _getLogger, is_ipv4


class EventType(Enum):
    CONNECTED = "connected"
    DATA_RECEIVED = "data_received"
    SEND_COMPLETED = "send_completed"
    CLOSED = "closed"
    RESOLUTION_RESULT = "resolution_result"


Event = namedtuple("Event", ["type", "data", "error"])
Event.__new__.__defaults__ = (None, None)


class Connection(object):
    """
    Lifecycle of a single transport connection: resolve, connect, send the
    request (in chunks on stream connections), receive, close.

    Every transport event passes through here before it is handed to
    `on_event`. The request buffer and the transport handle are released
    exactly once, on `close()` or when the peer closes, whichever comes
    first; events arriving after that are dropped.
    """

    def __init__(self, transport, chunk_size=TCP_CHUNK_SIZE):
        self.transport = transport
        self.chunk_size = chunk_size
        self.remote = None
        self.port = None
        self.remote_ip = None
        self.datagram = False
        self.buffer = None
        self.bytes_sent = 0
        self.released = False
        self._handle = None
        self._on_event = None
        self._payload = None
        self._log = _getLogger("Connection")

    def __repr__(self):
        return "<Connection %s:%s%s>" % (
            self.remote, self.port, " (released)" if self.released else "")

    @property
    def active(self):
        return not self.released and self._on_event is not None

    def open(self, remote, port, on_event, payload=None, datagram=False):
        """
        Start connecting to `remote`, a dotted IPv4 address or a name to
        resolve. `payload` is sent as soon as the connection is up. Raises
        `ResourceExhausted` when the transport cannot allocate a socket.
        """
        self.remote = remote
        self.port = port
        self.datagram = datagram
        self._on_event = on_event
        self._payload = payload
        if is_ipv4(remote):
            try:
                self._connect(remote)
            except ResourceExhausted:
                self.release()
                raise
        else:
            self._log.debug("Looking up %s", remote)
            self.transport.resolve(remote, self._resolved)
        return self

    def _connect(self, address):
        self.remote_ip = address
        self._log.debug("Connecting to %s:%d (%s)", address, self.port,
                        "udp" if self.datagram else "tcp")
        if self.datagram:
            self._handle = self.transport.open_udp(address, self.port, self._handle_event)
        else:
            self._handle = self.transport.open_tcp(address, self.port, self._handle_event)

    def _resolved(self, address):
        if self.released:
            self._log.debug("Dropping late resolution of %s", self.remote)
            return
        if not address or address == "0.0.0.0":
            exc = ResolutionFailed("No address found for %s" % self.remote)
            self._log.error("%s", exc)
            self.release()
            self._on_event(Event(EventType.RESOLUTION_RESULT, error=exc))
            return
        self._log.debug("Resolved %s to %s", self.remote, address)
        self._on_event(Event(EventType.RESOLUTION_RESULT, data=address))
        try:
            self._connect(address)
        except (ResourceExhausted, TransportFailed) as exc:
            self.release()
            self._on_event(Event(EventType.CLOSED, error=exc))

    def send(self, buffer):
        """
        Transmit `buffer`. Stream connections send at most `chunk_size` bytes
        per call and continue on every send-completion.
        """
        if self.released or self._handle is None:
            raise TransportFailed("Connection to %s is not open" % self.remote)
        self.buffer = buffer
        self.bytes_sent = 0
        self._send_next()

    def _send_next(self):
        if self.datagram:
            chunk = self.buffer
        else:
            chunk = self.buffer[self.bytes_sent:self.bytes_sent + self.chunk_size]
        self.bytes_sent += len(chunk)
        self._handle.send(chunk)

    def _handle_event(self, event):
        if self.released:
            self._log.debug("Dropping %s on released %r", event.type.value, self)
            return
        if event.type == EventType.CONNECTED:
            self._log.debug("Connected to %s:%d", self.remote_ip, self.port)
            if self._payload is not None:
                payload, self._payload = self._payload, None
                self.send(payload)
        elif event.type == EventType.SEND_COMPLETED:
            if self.buffer is not None and self.bytes_sent < len(self.buffer):
                self._send_next()
                return
            self.buffer = None
        elif event.type == EventType.CLOSED:
            if event.error is not None:
                self._log.error("Connection to %s:%s failed: %s", self.remote, self.port, event.error)
            self.release()
        self._on_event(event)

    def release(self):
        """
        Free the request buffer and the transport handle. Idempotent.
        """
        if self.released:
            return
        self.released = True
        self.buffer = None
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()

    close = release
