HTTP_TIMEOUT = 10

SSDP_TARGET = ("239.255.255.250", 1900)
SSDP_MX = 2
SSDP_MULTICAST_TTL = 2
ST_IGD = "urn:schemas-upnp-org:device:InternetGatewayDevice:1"

# Total number of M-SEARCH transmissions per discovery, first send included.
SSDP_MAX_SENDS = 4

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING_NS = "http://schemas.xmlsoap.org/soap/encoding/"

WAN_PPP_SERVICE_TYPE = "urn:schemas-upnp-org:service:WANPPPConnection:1"
WAN_PPP_SERVICE_ID = "urn:upnp-org:serviceId:WANPPPConn1"

PORT_MAPPING_PROTOCOL = "TCP"
PORT_MAPPING_DESCRIPTION = "libminiupnpc"
PORT_MAPPING_LEASE = 0

DEFAULT_HTTP_PORT = 80
USER_AGENT = "upnppunch"

# Largest slice of a request handed to a stream transport in one call.
TCP_CHUNK_SIZE = 1400
