"""
Incremental field extraction from HTTP replies.

Gateways answer with small, well known documents, so instead of parsing XML
the scanners look for a handful of markers. Replies arrive in arbitrary
segments; every scanner keeps the unconsumed tail of the previous segment so
that a marker split across two segments is still found.
"""
import ipaddress
import re

from .const import WAN_PPP_SERVICE_ID
from .errors import ERR_CODE_DESCRIPTIONS
from .soap import SOAPError
from .util import _getLogger


class StreamScanner(object):
    """
    Base class. Subclasses set `max_marker` and implement `_scan(buf)`, which
    returns `(consumed, waiting)`: the offset up to which `buf` has been
    fully processed, and whether a matched marker still needs more data.
    """

    max_marker = 1

    def __init__(self):
        self.done = False
        self._buffer = b""

    def feed(self, data):
        if self.done:
            return
        buf = self._buffer + data
        consumed, waiting = self._scan(buf)
        if self.done:
            self._buffer = b""
        elif waiting:
            self._buffer = buf[consumed:]
        else:
            self._buffer = buf[self._tail_start(buf, consumed):]

    def _tail_start(self, buf, consumed):
        start = max(consumed, len(buf) - self.max_marker + 1)
        # An unterminated tag may be longer than any fixed marker.
        last_open = buf.rfind(b"<", consumed)
        if last_open >= 0 and buf.find(b">", last_open) < 0:
            start = min(start, last_open)
        return start

    def _scan(self, buf):
        raise NotImplementedError()

    @staticmethod
    def _text(raw):
        return raw.decode("utf-8", "replace").strip()


class ControlURLScanner(StreamScanner):
    """
    Find the control URL of one service in a device description.

    `<service>` and `</service>` move a nesting counter. The control URL is
    only accepted from the same `<service>` block that names `service_id`,
    whichever of the two comes first inside the block.
    """

    def __init__(self, service_id=WAN_PPP_SERVICE_ID):
        super(ControlURLScanner, self).__init__()
        self.service_id = service_id
        self._service_marker = service_id.lower().encode("utf-8")
        markers = [b"<service>", b"</service>", b"<controlurl>", self._service_marker]
        self.pattern = re.compile(b"|".join(re.escape(m) for m in markers), re.IGNORECASE)
        self.max_marker = max(len(m) for m in markers)
        self.depth = 0
        self.target_depth = None
        self.control_url = None
        self._candidates = {}
        self._log = _getLogger("Scanner")

    def _accept(self, control_url):
        self.control_url = control_url
        self.done = True
        self._log.debug("%s: control URL %r", self.service_id, control_url)

    def _scan(self, buf):
        consumed = 0
        for match in self.pattern.finditer(buf):
            if match.start() < consumed:
                # Inside a controlURL value already read.
                continue
            token = match.group(0).lower()
            if token == b"<service>":
                self.depth += 1
            elif token == b"</service>":
                self._candidates.pop(self.depth, None)
                if self.target_depth == self.depth:
                    self.target_depth = None
                self.depth -= 1
            elif token == b"<controlurl>":
                end = buf.find(b"<", match.end())
                if end < 0:
                    return match.start(), True
                control_url = self._text(buf[match.end():end])
                if self.target_depth == self.depth:
                    self._accept(control_url)
                    return end, False
                self._candidates.setdefault(self.depth, control_url)
                consumed = end
                continue
            else:
                if self.depth in self._candidates:
                    self._accept(self._candidates[self.depth])
                    return match.end(), False
                self.target_depth = self.depth
            consumed = match.end()
        return consumed, False


class TagScanner(StreamScanner):
    """
    Capture the text following the first `<tag>` (attributes allowed) up to
    the next `<`.
    """

    def __init__(self, tag):
        super(TagScanner, self).__init__()
        self.tag = tag
        self.pattern = re.compile(
            b"<" + re.escape(tag.encode("utf-8")) + rb"(?:\s[^>]*)?>", re.IGNORECASE
        )
        self.max_marker = len(tag) + 2
        self.value = None

    def _scan(self, buf):
        match = self.pattern.search(buf)
        if match is None:
            return 0, False
        end = buf.find(b"<", match.end())
        if end < 0:
            return match.start(), True
        self.value = self._text(buf[match.end():end])
        self.done = True
        return end, False


class ExternalAddressScanner(TagScanner):
    def __init__(self):
        super(ExternalAddressScanner, self).__init__("NewExternalIPAddress")
        self._log = _getLogger("Scanner")

    @property
    def address(self):
        """
        The dotted IPv4 external address, or None if absent or unparsable.
        """
        if self.value is None:
            return None
        try:
            return str(ipaddress.IPv4Address(self.value))
        except ValueError:
            self._log.warning("Ignoring invalid external address %r", self.value)
            return None


class FaultScanner(object):
    """
    Detect a UPnP SOAP fault in an action reply.
    """

    def __init__(self):
        self._code = TagScanner("errorCode")
        self._description = TagScanner("errorDescription")

    def feed(self, data):
        self._code.feed(data)
        self._description.feed(data)

    @property
    def error(self):
        """
        A `SOAPError` when the reply carried an error code, else None.
        """
        if self._code.value is None:
            return None
        try:
            code = int(self._code.value)
        except ValueError:
            code = None
        description = self._description.value
        if not description and code is not None:
            description = ERR_CODE_DESCRIPTIONS.get(code)
        return SOAPError(code, description)
