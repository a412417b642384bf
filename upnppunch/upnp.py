from enum import Enum
from functools import partial

from .connection import Connection, EventType
from .const import (
    SSDP_TARGET,
    SSDP_MAX_SENDS,
    TCP_CHUNK_SIZE,
    USER_AGENT,
    WAN_PPP_SERVICE_ID,
    WAN_PPP_SERVICE_TYPE,
)
from .errors import (
    BusyError,
    InvalidLocation,
    ProtocolMismatch,
    ResourceExhausted,
    TransportFailed,
)
from .scanner import ControlURLScanner, ExternalAddressScanner, FaultScanner
from .soap import SOAP, description_request, host_header
from .ssdp import Discovery, analyze_location, find_location
from .util import _getLogger, local_address_for, parse_ipv4


class State(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    DEVICE_FOUND = "device_found"
    READY = "ready"
    ADDING = "adding"
    REMOVING = "removing"
    QUERYING_EXTERNAL_ADDRESS = "querying_external_address"


# States an operation falls back to when its exchange fails.
_FALLBACK = {
    State.DISCOVERING: State.IDLE,
    State.DEVICE_FOUND: State.IDLE,
    State.ADDING: State.READY,
    State.REMOVING: State.READY,
    State.QUERYING_EXTERNAL_ADDRESS: State.READY,
}


class GatewaySession(object):
    """
    Everything known about the gateway being negotiated with. One instance
    lives from a scan until the next scan or reset.
    """

    def __init__(self):
        self.state = State.IDLE
        self.location = None
        self.host = None
        self.description_path = None
        self.control_port = None
        self.control_url = None
        self.external_address = None
        self.local_ip = None
        self.local_port = None
        self.remote_port = None
        self.remote_ip = None
        self.connection = None
        self.last_error = None

    def __repr__(self):
        return "<GatewaySession %s %s>" % (self.state.name, self.location)

    @property
    def pending_buffer(self):
        if self.connection is None:
            return None
        return self.connection.buffer

    @property
    def bytes_sent(self):
        if self.connection is None:
            return 0
        return self.connection.bytes_sent


class Gateway(object):
    """
    UPnP IGD control point for a single gateway.

    The entry points (`scan`, `add_port`, `remove_port`,
    `query_external_address`, `reset`) return as soon as the network
    exchange has been started. Transport events come back through `handle`,
    which advances the session one step at a time. Only one exchange is in
    flight at any time.

    Example, on a running event loop:

    >>> gateway = Gateway(AsyncioTransport())
    >>> gateway.scan()
    >>> # ... later, once gateway.state is State.READY
    >>> gateway.add_port('192.168.1.176', 80, 9876)
    """

    def __init__(
        self,
        transport,
        service_id=WAN_PPP_SERVICE_ID,
        service_type=WAN_PPP_SERVICE_TYPE,
        user_agent=USER_AGENT,
        max_ssdp_sends=SSDP_MAX_SENDS,
        chunk_size=TCP_CHUNK_SIZE,
    ):
        self.transport = transport
        self.service_id = service_id
        self.service_type = service_type
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self.session = None
        self._discovery = Discovery(max_sends=max_ssdp_sends)
        self._scanners = {}
        self._log = _getLogger("Gateway")
        self._handlers = {
            State.DISCOVERING: self._handle_discovering,
            State.DEVICE_FOUND: self._handle_device_found,
            State.ADDING: self._handle_port_mapping,
            State.REMOVING: self._handle_port_mapping,
            State.QUERYING_EXTERNAL_ADDRESS: self._handle_querying,
        }

    def __repr__(self):
        return "<Gateway %s>" % (self.state.name)

    @property
    def state(self):
        if self.session is None:
            return State.IDLE
        return self.session.state

    @property
    def ready(self):
        session = self.session
        return (
            session is not None
            and session.state == State.READY
            and session.remote_ip is not None
        )

    # Entry points

    def scan(self, location=None):
        """
        Start looking for the gateway. Returns the gateway address when it
        is already known and ready, None when discovery has been started.

        With `location` (the URL of the device description) SSDP is skipped.
        """
        if self.ready:
            return self.session.remote_ip
        if self.state != State.IDLE:
            raise BusyError("Cannot scan while %s" % self.state.value)
        parsed = analyze_location(location) if location is not None else None
        self.reset()
        self.session = GatewaySession()
        try:
            if parsed is not None:
                self._fetch_description(parsed)
            else:
                self._discovery.reset()
                self.session.state = State.DISCOVERING
                self._log.debug("Discovering gateway on %s:%d", *SSDP_TARGET)
                self._open(SSDP_TARGET[0], SSDP_TARGET[1], datagram=True)
        except ResourceExhausted:
            self.session = None
            raise
        return None

    def add_port(self, local_ip, local_port, remote_port):
        """
        Ask the gateway to forward TCP `remote_port` to `local_ip:local_port`.
        `local_ip` may be None to use this machine's address on the gateway's
        subnet.
        """
        session = self._check_ready("add a port mapping")
        local_port = _check_port(local_port)
        remote_port = _check_port(remote_port)
        if local_ip is None:
            local_ip = local_address_for(session.remote_ip)
            if local_ip is None:
                raise ValueError("No local IPv4 address to map to")
        else:
            local_ip = parse_ipv4(local_ip)
        session.local_ip = local_ip
        session.local_port = local_port
        session.remote_port = remote_port
        self._log.debug("Adding port mapping %d -> %s:%d", remote_port, local_ip, local_port)
        request = self._soap().add_port_mapping(local_ip, local_port, remote_port)
        self._start(State.ADDING, request, fault=FaultScanner())

    def remove_port(self, remote_port):
        """
        Ask the gateway to drop the TCP mapping of `remote_port`.
        """
        session = self._check_ready("remove a port mapping")
        session.remote_port = _check_port(remote_port)
        self._log.debug("Removing port mapping %d", session.remote_port)
        request = self._soap().delete_port_mapping(session.remote_port)
        self._start(State.REMOVING, request, fault=FaultScanner())

    def query_external_address(self):
        """
        Poll for the gateway's external address. The first call sends the
        query and returns None; later calls return None until the reply has
        been seen, then the dotted address.
        """
        session = self.session
        if session is not None and session.state == State.QUERYING_EXTERNAL_ADDRESS:
            if session.external_address is not None:
                if session.connection is not None:
                    session.connection.close()
                    session.connection = None
                session.state = State.READY
                return session.external_address
            if session.connection is None:
                # The reply is complete and carried no address.
                self._log.warning("Gateway reply held no external address")
                session.state = State.READY
            return None
        session = self._check_ready("query the external address")
        session.external_address = None
        request = self._soap().get_external_ip_address()
        self._start(
            State.QUERYING_EXTERNAL_ADDRESS, request,
            address=ExternalAddressScanner(), fault=FaultScanner())
        return None

    def reset(self):
        """
        Drop the session, closing its connection if one is open.
        """
        session, self.session = self.session, None
        if session is not None and session.connection is not None:
            session.connection.close()
            session.connection = None
        self._scanners = {}

    def status(self):
        session = self.session or GatewaySession()
        return dict(
            state=session.state.value,
            location=session.location,
            host=session.host,
            control_port=session.control_port,
            control_url=session.control_url,
            remote_ip=session.remote_ip,
            external_address=session.external_address,
            last_error=repr(session.last_error) if session.last_error is not None else None,
        )

    # State machine

    def handle(self, event):
        """
        Advance the session by one transport event.
        """
        session = self.session
        try:
            if session is None:
                raise ProtocolMismatch("%s without a session" % event.type.value)
            if event.type == EventType.RESOLUTION_RESULT:
                if event.error is not None:
                    self._fail(event.error)
                else:
                    session.remote_ip = event.data
                return
            if event.type == EventType.CLOSED and event.error is not None:
                if not (session.state == State.QUERYING_EXTERNAL_ADDRESS
                        and session.external_address is not None):
                    self._fail(event.error)
                    return
                # The reply is complete; keep it for the next poll.
                self._log.warning("Connection closed after reply: %s", event.error)
            handler = self._handlers.get(session.state)
            if handler is None:
                raise ProtocolMismatch("%s while %s" % (event.type.value, session.state.value))
            handler(event)
        except ProtocolMismatch as exc:
            self._log.warning("Ignoring event: %s", exc)

    def _handle_discovering(self, event):
        session = self.session
        if event.type in (EventType.CONNECTED, EventType.SEND_COMPLETED):
            self._discovery.send(session.connection)
        elif event.type == EventType.DATA_RECEIVED:
            location = find_location(event.data)
            if location is None:
                self._log.debug("Ignoring SSDP reply without LOCATION")
                return
            try:
                parsed = analyze_location(location)
            except InvalidLocation as exc:
                self._log.warning("Ignoring SSDP reply: %s", exc)
                return
            session.connection.close()
            session.connection = None
            try:
                self._fetch_description(parsed)
            except ResourceExhausted as exc:
                self._fail(exc)
        elif event.type == EventType.CLOSED:
            self._fail(TransportFailed("Discovery endpoint closed"))

    def _handle_device_found(self, event):
        session = self.session
        if event.type == EventType.DATA_RECEIVED:
            self._scanners["control_url"].feed(event.data)
        elif event.type == EventType.CLOSED:
            session.connection = None
            session.control_url = self._scanners.pop("control_url").control_url
            if session.control_url is None:
                self._log.warning("%s: no control URL for %s", session.location, self.service_id)
            else:
                self._log.info("Gateway %s ready, control URL %s", session.host, session.control_url)
            session.state = State.READY

    def _handle_port_mapping(self, event):
        session = self.session
        if event.type == EventType.DATA_RECEIVED:
            self._scanners["fault"].feed(event.data)
        elif event.type == EventType.CLOSED:
            session.connection = None
            error = self._scanners.pop("fault").error
            if error is not None:
                session.last_error = error
                self._log.warning("Gateway refused %s of port %d: %s",
                                  session.state.value, session.remote_port, error)
            else:
                self._log.info("Port mapping request for %d sent (%s)",
                               session.remote_port, session.state.value)
            session.state = State.READY

    def _handle_querying(self, event):
        session = self.session
        if event.type == EventType.DATA_RECEIVED:
            self._scanners["fault"].feed(event.data)
            scanner = self._scanners.get("address")
            if scanner is None:
                return
            scanner.feed(event.data)
            if scanner.done:
                del self._scanners["address"]
                session.external_address = scanner.address
                if session.external_address is not None:
                    self._log.info("External address is %s", session.external_address)
        elif event.type == EventType.CLOSED:
            session.connection = None
            error = self._scanners["fault"].error
            if error is not None:
                session.last_error = error
                self._log.warning("Gateway refused external address query: %s", error)
            # Stay in this state until polled.

    # Helpers

    def _check_ready(self, action):
        if not self.ready:
            raise BusyError("Cannot %s while %s" % (action, self.state.value))
        if not self.session.control_url:
            raise BusyError("Cannot %s: gateway has no control URL" % action)
        return self.session

    def _soap(self):
        session = self.session
        return SOAP(
            session.control_url,
            host_header(session.host, session.control_port),
            service_type=self.service_type,
            user_agent=self.user_agent,
        )

    def _fetch_description(self, parsed):
        session = self.session
        session.location = parsed.location
        session.host = parsed.host
        session.control_port = parsed.port
        session.description_path = parsed.path
        session.state = State.DEVICE_FOUND
        self._scanners = {"control_url": ControlURLScanner(self.service_id)}
        self._log.info("Found gateway at %s", parsed.location)
        request = description_request(
            parsed.path, host_header(parsed.host, parsed.port), self.user_agent)
        self._open(parsed.host, parsed.port, payload=request)

    def _start(self, state, request, **scanners):
        session = self.session
        session.state = state
        session.last_error = None
        self._scanners = scanners
        try:
            self._open(session.host, session.control_port, payload=request)
        except ResourceExhausted:
            session.state = State.IDLE
            raise

    def _open(self, remote, port, payload=None, datagram=False):
        session = self.session
        connection = Connection(self.transport, chunk_size=self.chunk_size)
        # Set before opening: a transport may report synchronously.
        session.connection = connection
        try:
            connection.open(remote, port, partial(self._on_event, connection),
                            payload=payload, datagram=datagram)
        except ResourceExhausted as exc:
            session.connection = None
            self._log.error("%s", exc)
            raise
        if datagram:
            return connection
        if connection.remote_ip is not None:
            session.remote_ip = connection.remote_ip
        return connection

    def _on_event(self, connection, event):
        if self.session is None or connection is not self.session.connection:
            self._log.debug("Dropping %s from stale %r", event.type.value, connection)
            return
        self.handle(event)

    def _fail(self, exc):
        session = self.session
        if session.connection is not None:
            session.connection.close()
            session.connection = None
        session.last_error = exc
        fallback = _FALLBACK.get(session.state, session.state)
        self._log.error("%s failed: %s", session.state.value, exc)
        session.state = fallback


def _check_port(port):
    port = int(port)
    if not 0 < port < 65536:
        raise ValueError("Port %d out of range" % port)
    return port
