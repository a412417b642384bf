from collections import OrderedDict
from xml.sax.saxutils import escape

from .const import (
    SOAP_ENVELOPE_NS,
    SOAP_ENCODING_NS,
    WAN_PPP_SERVICE_TYPE,
    USER_AGENT,
    DEFAULT_HTTP_PORT,
    PORT_MAPPING_PROTOCOL,
    PORT_MAPPING_DESCRIPTION,
    PORT_MAPPING_LEASE,
)
from .errors import UPNPError
from .util import _getLogger


class SOAPError(UPNPError):
    """
    The gateway answered an action with a UPnP fault. `args` holds the
    error code and its description.
    """

    pass


def host_header(host, port):
    if port == DEFAULT_HTTP_PORT:
        return host
    return "%s:%d" % (host, port)


def _http_request(request_line, headers, body=b""):
    head = "\r\n".join([request_line] + ["%s: %s" % (k, v) for k, v in headers.items()])
    return (head + "\r\n\r\n").encode("utf-8") + body


def description_request(path, host, user_agent=USER_AGENT):
    """
    Build the HTTP/1.0 GET for a device description. The server closes the
    connection after the reply, which marks the end of the body.
    """
    headers = OrderedDict()
    headers["Host"] = host
    headers["Connection"] = "close"
    headers["User-Agent"] = user_agent
    return _http_request("GET %s HTTP/1.0" % (path or "/"), headers)


class SOAP(object):
    """SOAP (Simple Object Access Protocol) request builder
    Builds complete HTTP/1.0 POST requests for the actions of one service.
    Nothing is sent from here; the caller owns the connection.
    """
    def __init__(self, url, host, service_type=WAN_PPP_SERVICE_TYPE, user_agent=USER_AGENT):
        self.url = url
        self.host = host
        self.service_type = service_type
        self.user_agent = user_agent
        self._log = _getLogger('SOAP')

    def envelope(self, action_name, arg_in=None):
        """
        Return the encoded XML envelope for `action_name`. `arg_in` is an
        ordered mapping of argument names to values.
        """
        if arg_in is None:
            arg_in = {}
        lines = [
            '<?xml version="1.0"?>',
            '<s:Envelope xmlns:s="{}" s:encodingStyle="{}">'.format(SOAP_ENVELOPE_NS, SOAP_ENCODING_NS),
            '<s:Body>',
            '<u:{} xmlns:u="{}">'.format(action_name, self.service_type),
        ]
        lines.extend('<%s>%s</%s>' % (k, escape(str(v)), k) for k, v in arg_in.items())
        lines.extend([
            '</u:{}>'.format(action_name),
            '</s:Body>',
            '</s:Envelope>',
            '',
        ])
        return '\r\n'.join(lines).encode('utf-8')

    def request(self, action_name, arg_in=None):
        """
        Return the full POST request. Content-Length is taken from the
        encoded body, after substitution.
        """
        body = self.envelope(action_name, arg_in)
        headers = OrderedDict()
        headers['Host'] = self.host
        headers['User-Agent'] = self.user_agent
        headers['Content-Length'] = str(len(body))
        headers['Content-Type'] = 'text/xml'
        headers['SOAPAction'] = '"%s#%s"' % (self.service_type, action_name)
        headers['Connection'] = 'Close'
        headers['Cache-Control'] = 'no-cache'
        headers['Pragma'] = 'no-cache'
        self._log.debug(">> %s %s (%s)", self.url, action_name, dict(arg_in or {}))
        return _http_request('POST %s HTTP/1.0' % self.url, headers, body)

    def add_port_mapping(self, local_ip, local_port, remote_port):
        arg_in = OrderedDict()
        arg_in['NewRemoteHost'] = ''
        arg_in['NewExternalPort'] = int(remote_port)
        arg_in['NewProtocol'] = PORT_MAPPING_PROTOCOL
        arg_in['NewInternalPort'] = int(local_port)
        arg_in['NewInternalClient'] = local_ip
        arg_in['NewEnabled'] = 1
        arg_in['NewPortMappingDescription'] = PORT_MAPPING_DESCRIPTION
        arg_in['NewLeaseDuration'] = PORT_MAPPING_LEASE
        return self.request('AddPortMapping', arg_in)

    def delete_port_mapping(self, remote_port):
        arg_in = OrderedDict()
        arg_in['NewRemoteHost'] = ''
        arg_in['NewExternalPort'] = int(remote_port)
        arg_in['NewProtocol'] = PORT_MAPPING_PROTOCOL
        return self.request('DeletePortMapping', arg_in)

    def get_external_ip_address(self):
        return self.request('GetExternalIPAddress')
