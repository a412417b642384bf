"""
Command channel to a `Gateway`.

`ControlChannel` exposes the five requests with integer replies: 0 for
"started" or "nothing yet", -1 when there is no ready gateway, and IPv4
addresses as 32 bit integers. `create_app` serves a channel over HTTP with
aiohttp and `ControlClient` talks to such a server with requests.
"""
import requests
from aiohttp import web

from .const import HTTP_TIMEOUT
from .errors import BusyError, ResourceExhausted
from .util import _getLogger, ipv4_to_int, parse_ipv4


class ControlChannel(object):
    def __init__(self, gateway):
        self.gateway = gateway
        self._log = _getLogger("ControlChannel")

    def scan(self):
        try:
            address = self.gateway.scan()
        except BusyError as exc:
            self._log.debug("Scan rejected: %s", exc)
            return 0
        except ResourceExhausted as exc:
            self._log.error("Scan failed: %s", exc)
            return 0
        return ipv4_to_int(address) if address else 0

    def add_port(self, local_ip, local_port, remote_port):
        try:
            self.gateway.add_port(local_ip, local_port, remote_port)
        except (BusyError, ResourceExhausted) as exc:
            self._log.info("Add port rejected: %s", exc)
            return -1
        return 0

    def remove_port(self, remote_port):
        try:
            self.gateway.remove_port(remote_port)
        except (BusyError, ResourceExhausted) as exc:
            self._log.info("Remove port rejected: %s", exc)
            return -1
        return 0

    def query_external_address(self):
        try:
            address = self.gateway.query_external_address()
        except (BusyError, ResourceExhausted) as exc:
            self._log.info("External address query rejected: %s", exc)
            return -1
        return ipv4_to_int(address) if address else 0

    def reset(self):
        self.gateway.reset()
        return 0

    def status(self):
        return self.gateway.status()


CHANNEL = web.AppKey("channel", ControlChannel)

routes = web.RouteTableDef()


def _result(value):
    return web.json_response({"result": value})


@routes.post("/scan")
async def scan(request):
    return _result(request.app[CHANNEL].scan())


@routes.post("/ports")
async def add_port(request):
    try:
        args = await request.json()
        result = request.app[CHANNEL].add_port(
            args.get("local_ip"), args["local_port"], args["remote_port"])
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise web.HTTPBadRequest(text="Invalid port mapping: %s" % exc)
    return _result(result)


@routes.delete("/ports/{remote_port}")
async def remove_port(request):
    try:
        result = request.app[CHANNEL].remove_port(int(request.match_info["remote_port"]))
    except ValueError as exc:
        raise web.HTTPBadRequest(text="Invalid port: %s" % exc)
    return _result(result)


@routes.get("/external-address")
async def query_external_address(request):
    return _result(request.app[CHANNEL].query_external_address())


@routes.post("/reset")
async def reset(request):
    return _result(request.app[CHANNEL].reset())


@routes.get("/status")
async def status(request):
    return web.json_response(request.app[CHANNEL].status())


def create_app(channel):
    app = web.Application()
    app[CHANNEL] = channel
    app.add_routes(routes)
    return app


class ControlClient(object):
    """
    Client for a control channel served by `create_app`. Return values are
    the same integers `ControlChannel` produces.
    """

    def __init__(self, url, session=None, timeout=HTTP_TIMEOUT):
        self.url = url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._log = _getLogger("ControlClient")

    def _call(self, method, path, **kwargs):
        self._log.debug(">> %s %s %s", method, path, kwargs.get("json", ""))
        resp = self.session.request(method, self.url + path, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp.json()["result"]

    def scan(self):
        return self._call("POST", "/scan")

    def add_port(self, local_ip, local_port, remote_port):
        if local_ip is not None:
            local_ip = parse_ipv4(local_ip)
        return self._call("POST", "/ports", json=dict(
            local_ip=local_ip, local_port=local_port, remote_port=remote_port))

    def remove_port(self, remote_port):
        return self._call("DELETE", "/ports/%d" % remote_port)

    def query_external_address(self):
        return self._call("GET", "/external-address")

    def reset(self):
        return self._call("POST", "/reset")

    def status(self):
        resp = self.session.request("GET", self.url + "/status", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()
