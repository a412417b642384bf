import re
from collections import namedtuple

from .const import SSDP_TARGET, SSDP_MX, SSDP_MAX_SENDS, ST_IGD, DEFAULT_HTTP_PORT
from .errors import InvalidLocation
from .util import _getLogger

LOCATION_RE = re.compile(rb"\r\nLOCATION:[ \t]*([^\r\n]*)")


Location = namedtuple("Location", ["location", "host", "port", "path"])


def ssdp_request(ssdp_st=ST_IGD, ssdp_mx=SSDP_MX):
    """Return request bytes for given st and mx."""
    return "\r\n".join(
        [
            "M-SEARCH * HTTP/1.1",
            "HOST: {}:{}".format(*SSDP_TARGET),
            "ST: {}".format(ssdp_st),
            'MAN: "ssdp:discover"',
            "MX: {:d}".format(ssdp_mx),
            "",
        ]
    ).encode("utf-8")


SSDP_REQUEST = ssdp_request()


def find_location(datagram):
    """
    Return the value of the first LOCATION header of an SSDP reply, or None.
    The header name is matched case-sensitively.
    """
    match = LOCATION_RE.search(datagram)
    if match is None:
        return None
    location = match.group(1).strip().decode("utf-8", "replace")
    return location or None


def analyze_location(location):
    """
    Split a device description URL of the form http://host[:port]/path into
    a `Location`. The port defaults to 80 and the path is empty when the URL
    has none.

    >>> analyze_location('http://192.168.1.1:8000/desc.xml')
    Location(location='http://192.168.1.1:8000/desc.xml', host='192.168.1.1', port=8000, path='/desc.xml')
    """
    rest = location.split("//", 1)[-1]
    authority, slash, path = rest.partition("/")
    host, colon, port = authority.partition(":")
    if not host:
        raise InvalidLocation("No host in location %r" % location)
    if colon:
        try:
            port = int(port)
        except ValueError:
            raise InvalidLocation("Invalid port in location %r" % location)
        if not 0 < port < 65536:
            raise InvalidLocation("Port out of range in location %r" % location)
    else:
        port = DEFAULT_HTTP_PORT
    return Location(location, host, port, slash + path)


class Discovery(object):
    """
    SSDP discovery engine. Transmits the M-SEARCH datagram on a connection
    and retransmits it on every send-completion, bounded by `max_sends`
    transmissions in total.
    """

    def __init__(self, max_sends=SSDP_MAX_SENDS, request=SSDP_REQUEST):
        self.max_sends = max_sends
        self.request = request
        self.sends = 0
        self._log = _getLogger("SSDP")

    def reset(self):
        self.sends = 0

    def send(self, connection):
        """
        Send (or resend) the query. Returns False once max_sends is reached.
        """
        if self.sends >= self.max_sends:
            self._log.debug("M-SEARCH limit reached after %d sends", self.sends)
            return False
        self.sends += 1
        self._log.debug("Sending M-SEARCH %d/%d", self.sends, self.max_sends)
        connection.send(self.request)
        return True
