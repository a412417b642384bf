from functools import wraps

from upnppunch.connection import Event, EventType
from upnppunch.errors import ResourceExhausted


class MockHandle(object):
    """Transport handle that records what it is asked to send."""
    def __init__(self, transport, address, port, on_event, datagram=False):
        self.transport = transport
        self.address = address
        self.port = port
        self.on_event = on_event
        self.datagram = datagram
        self.sent = []
        self.closed = False

    def send(self, data):
        self.sent.append(data)

    def close(self):
        self.closed = True
        self.transport.close_count += 1

    def emit(self, event_type, data=None, error=None):
        self.on_event(Event(event_type, data=data, error=error))

    def connected(self):
        self.emit(EventType.CONNECTED)

    def sent_ok(self):
        self.emit(EventType.SEND_COMPLETED)

    def receive(self, data):
        self.emit(EventType.DATA_RECEIVED, data=data)

    def peer_closed(self, error=None):
        self.emit(EventType.CLOSED, error=error)

    def deliver(self, *segments):
        """
        Run a whole request/response exchange: connect, complete every
        send, receive `segments` and close.
        """
        self.connected()
        while True:
            count = len(self.sent)
            self.sent_ok()
            if len(self.sent) == count:
                break
        for segment in segments:
            self.receive(segment)
        self.peer_closed()

    @property
    def data(self):
        return b"".join(self.sent)


class MockTransport(object):
    """
    Transport that never touches the network. Name lookups are answered
    from `names` when `resolve` is called, or held back with
    `defer_resolution` until `finish_resolution`.
    """
    def __init__(self, names=None, exhausted=False):
        self.names = names or {}
        self.exhausted = exhausted
        self.defer_resolution = False
        self.handles = []
        self.lookups = []
        self.close_count = 0
        self._pending = []

    def resolve(self, name, callback):
        self.lookups.append(name)
        if self.defer_resolution:
            self._pending.append((name, callback))
        else:
            callback(self.names.get(name))

    def finish_resolution(self):
        pending, self._pending = self._pending, []
        for name, callback in pending:
            callback(self.names.get(name))

    def _open(self, address, port, on_event, datagram):
        if self.exhausted:
            raise ResourceExhausted("No sockets left")
        handle = MockHandle(self, address, port, on_event, datagram=datagram)
        self.handles.append(handle)
        return handle

    def open_tcp(self, address, port, on_event):
        return self._open(address, port, on_event, False)

    def open_udp(self, address, port, on_event):
        return self._open(address, port, on_event, True)

    @property
    def last(self):
        return self.handles[-1]


def async_test(f):
    """
    Decorator to create asyncio context for asyncio methods or functions.
    """
    @wraps(f)
    def g(*args, **kwargs):
        args[0].loop.run_until_complete(f(*args, **kwargs))
    return g


class SimpleMock(dict):
    """Case insensitive dict to mock HTTP response."""
    def __init__(self, *args, **kwargs):
        super(SimpleMock, self).__init__(*args, **kwargs)
        for k in list(self.keys()):
            v = super(SimpleMock, self).pop(k)
            self.__setitem__(k, v)

    def __setitem__(self, key, value):
        super(SimpleMock, self).__setitem__(str(key).lower(), value)

    def __getitem__(self, key):
        if key.lower() not in self:
            return None
        return super(SimpleMock, self).__getitem__(key.lower())

    def __setattr__(self, key, value):
        self.__setitem__(key, value)

    def __getattr__(self, key):
        return self.__getitem__(key)


class SimpleMockRequest(SimpleMock):
    """Records what the gateway sent to the aiohttp test server."""
    def update(self, request, body):
        self.clear()
        self.headers = SimpleMock(request.headers)
        self.method = request.method
        self.path = request.path
        self.version = request.version
        self.body = body
