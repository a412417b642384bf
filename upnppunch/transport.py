"""
The socket service underneath the gateway session.

A transport opens UDP and TCP connections and resolves names without
blocking. Whatever happens on a connection is reported back as an `Event`
through the `on_event` callback given when it was opened; name lookups
report through their own callback. `AsyncioTransport` is the asyncio
implementation; tests substitute their own.
"""
import asyncio
import socket

from .connection import Event, EventType
from .const import SSDP_MULTICAST_TTL
from .errors import ResourceExhausted, TransportFailed
from .util import _getLogger


class Transport(object):
    """
    Interface of a non-blocking socket service.
    """

    def resolve(self, name, callback):
        """
        Look up the IPv4 address of `name`, then call `callback(address)`,
        with None when nothing was found.
        """
        raise NotImplementedError()

    def open_tcp(self, address, port, on_event):
        """
        Start connecting to `address:port`. Returns a handle with `send(data)`
        and `close()`. Raises `ResourceExhausted` when no socket is available.
        """
        raise NotImplementedError()

    def open_udp(self, address, port, on_event):
        """
        Open a datagram endpoint sending to `address:port`, which may be a
        multicast group. Same handle contract as `open_tcp`.
        """
        raise NotImplementedError()


class _Handle(object):
    def __init__(self, loop, sock, on_event, remote=None, send_delay=0):
        self.loop = loop
        self.sock = sock
        self.remote = remote
        self.send_delay = send_delay
        self.protocol = None
        self.task = None
        self.closed = False
        self._on_event = on_event
        self._timers = []

    def emit(self, event):
        if not self.closed:
            self._on_event(event)

    def send(self, data):
        transport = self.protocol.transport if self.protocol is not None else None
        if self.closed or transport is None:
            raise TransportFailed("Send on a connection that is not established")
        if self.remote is not None:
            transport.sendto(data, self.remote)
        else:
            transport.write(data)
        self._timers.append(
            self.loop.call_later(self.send_delay, self.emit, Event(EventType.SEND_COMPLETED)))

    def close(self):
        if self.closed:
            return
        self.closed = True
        for timer in self._timers:
            timer.cancel()
        del self._timers[:]
        if self.task is not None and not self.task.done():
            self.task.cancel()
        transport = self.protocol.transport if self.protocol is not None else None
        if transport is not None:
            transport.close()
        else:
            self.sock.close()


class _StreamProtocol(asyncio.Protocol):
    def __init__(self, handle):
        self.handle = handle
        self.transport = None

    def connection_made(self, transport):
        self.transport = transport
        self.handle.emit(Event(EventType.CONNECTED))

    def data_received(self, data):
        self.handle.emit(Event(EventType.DATA_RECEIVED, data=data))

    def connection_lost(self, exc):
        error = TransportFailed(str(exc)) if exc is not None else None
        self.handle.emit(Event(EventType.CLOSED, error=error))


class _DatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self, handle):
        self.handle = handle
        self.transport = None
        self._log = _getLogger("Transport")

    def connection_made(self, transport):
        self.transport = transport
        self.handle.emit(Event(EventType.CONNECTED))

    def datagram_received(self, data, addr):
        self._log.debug("%d byte datagram from %s:%d", len(data), addr[0], addr[1])
        self.handle.emit(Event(EventType.DATA_RECEIVED, data=data))

    def error_received(self, exc):
        self._log.warning("UDP transport error: %s", exc)

    def connection_lost(self, exc):
        error = TransportFailed(str(exc)) if exc is not None else None
        self.handle.emit(Event(EventType.CLOSED, error=error))


class AsyncioTransport(Transport):
    """
    Transport on an asyncio event loop. Must be used from the loop's thread.

    `local_address` selects the interface multicast goes out on.
    `datagram_interval` paces the send-completion of datagrams, which in turn
    paces SSDP retransmission.
    """

    def __init__(self, loop=None, local_address=None, multicast_ttl=SSDP_MULTICAST_TTL,
                 datagram_interval=0.5):
        self._loop = loop
        self.local_address = local_address
        self.multicast_ttl = multicast_ttl
        self.datagram_interval = datagram_interval
        self._tasks = set()
        self._log = _getLogger("Transport")

    @property
    def loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def resolve(self, name, callback):
        task = self.loop.create_task(self._resolve(name, callback))
        # The loop only keeps weak references to tasks.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _resolve(self, name, callback):
        try:
            infos = await self.loop.getaddrinfo(
                name, None, family=socket.AF_INET, type=socket.SOCK_STREAM)
        except OSError as exc:
            self._log.error("Lookup of %s failed: %s", name, exc)
            infos = []
        callback(infos[0][4][0] if infos else None)

    def open_tcp(self, address, port, on_event):
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise ResourceExhausted("Unable to allocate a TCP socket: %s" % exc)
        sock.setblocking(False)
        handle = _Handle(self.loop, sock, on_event)
        handle.protocol = _StreamProtocol(handle)
        handle.task = self.loop.create_task(self._connect(handle, address, port))
        return handle

    async def _connect(self, handle, address, port):
        try:
            await self.loop.sock_connect(handle.sock, (address, port))
            await self.loop.create_connection(lambda: handle.protocol, sock=handle.sock)
        except OSError as exc:
            handle.sock.close()
            handle.emit(Event(EventType.CLOSED, error=TransportFailed(
                "Connecting to %s:%d failed: %s" % (address, port, exc))))

    def open_udp(self, address, port, on_event):
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        except OSError as exc:
            raise ResourceExhausted("Unable to allocate a UDP socket: %s" % exc)
        try:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self.multicast_ttl)
            if self.local_address:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF,
                                socket.inet_aton(self.local_address))
            sock.bind((self.local_address or "", 0))
        except OSError as exc:
            sock.close()
            raise ResourceExhausted("Unable to set up a UDP socket: %s" % exc)
        sock.setblocking(False)
        handle = _Handle(self.loop, sock, on_event, remote=(address, port),
                         send_delay=self.datagram_interval)
        handle.protocol = _DatagramProtocol(handle)
        handle.task = self.loop.create_task(self._open_endpoint(handle))
        return handle

    async def _open_endpoint(self, handle):
        try:
            await self.loop.create_datagram_endpoint(lambda: handle.protocol, sock=handle.sock)
        except OSError as exc:
            handle.sock.close()
            handle.emit(Event(EventType.CLOSED, error=TransportFailed(
                "Opening UDP endpoint failed: %s" % exc)))
