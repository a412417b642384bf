LOCALHOST = "127.0.0.1"
HTTP_LOCALHOST = "http://%s" % LOCALHOST
ASYNC_SERVER_PORT = 8109
ASYNC_HOST = "%s:%r" % (LOCALHOST, ASYNC_SERVER_PORT)
ASYNC_SERVER_ADDR = "%s:%r" % (HTTP_LOCALHOST, ASYNC_SERVER_PORT)

GATEWAY_IP = "192.168.1.1"
GATEWAY_LOCATION = "http://192.168.1.1:5431/dyndev/uuid:0000e068-20a0-00e0-20a0-48a802086048"
CONTROL_URL = "/uuid:0000e068-20a0-00e0-20a0-48a8000808e0/WANPPPConnection:1"

SSDP_REPLY = (
    "HTTP/1.1 200 OK\r\n"
    "CACHE-CONTROL: max-age=1800\r\n"
    "EXT:\r\n"
    "LOCATION: %s\r\n"
    "SERVER: Linux/2.4 UPnP/1.0 BRCM400/1.0\r\n"
    "ST: urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
    "USN: uuid:0000e068-20a0-00e0-20a0-48a802086048::urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
    "\r\n" % GATEWAY_LOCATION
).encode("utf-8")

SSDP_REPLY_LOWERCASE = SSDP_REPLY.replace(b"LOCATION:", b"location:")

SSDP_REPLY_NO_LOCATION = (
    b"HTTP/1.1 200 OK\r\n"
    b"CACHE-CONTROL: max-age=1800\r\n"
    b"ST: urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
    b"\r\n"
)

# Two services. The WANIPConnection block comes first so that a scanner
# picking the first controlURL would return the wrong one.
DESCRIPTION = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
<specVersion><major>1</major><minor>0</minor></specVersion>
<device>
<deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:1</deviceType>
<serviceList>
<service>
<serviceType>urn:schemas-upnp-org:service:WANIPConnection:1</serviceType>
<serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
<controlURL>/ctl/IPConn</controlURL>
<eventSubURL>/evt/IPConn</eventSubURL>
<SCPDURL>/WANIPCn.xml</SCPDURL>
</service>
<service>
<serviceType>urn:schemas-upnp-org:service:WANPPPConnection:1</serviceType>
<serviceId>urn:upnp-org:serviceId:WANPPPConn1</serviceId>
<controlURL>%s</controlURL>
<eventSubURL>/evt/PPPConn</eventSubURL>
<SCPDURL>/WANPPPCn.xml</SCPDURL>
</service>
</serviceList>
</device>
</root>
""" % CONTROL_URL

# controlURL ahead of serviceId inside the matching block.
DESCRIPTION_URL_FIRST = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
<serviceList>
<service>
<controlURL>/ctl/IPConn</controlURL>
<serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
</service>
<service>
<controlURL>/ctl/PPPConn</controlURL>
<serviceId>urn:upnp-org:serviceId:WANPPPConn1</serviceId>
</service>
</serviceList>
</root>
"""

DESCRIPTION_NO_PPP = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
<serviceList>
<service>
<serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
<controlURL>/ctl/IPConn</controlURL>
</service>
</serviceList>
</root>
"""

HTTP_OK = b"HTTP/1.0 200 OK\r\nContent-Type: text/xml\r\nConnection: close\r\n\r\n"

EXTERNAL_IP_RESPONSE = """<?xml version="1.0"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
<s:Body>
<u:GetExternalIPAddressResponse xmlns:u="urn:schemas-upnp-org:service:WANPPPConnection:1">
<NewExternalIPAddress>203.0.113.7</NewExternalIPAddress>
</u:GetExternalIPAddressResponse>
</s:Body>
</s:Envelope>
"""

EXTERNAL_IP = "203.0.113.7"

ADD_PORT_MAPPING_RESPONSE = """<?xml version="1.0"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
<s:Body>
<u:AddPortMappingResponse xmlns:u="urn:schemas-upnp-org:service:WANPPPConnection:1"/>
</s:Body>
</s:Envelope>
"""

CONFLICT_FAULT = """<?xml version="1.0"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
<s:Body>
<s:Fault>
<faultcode>s:Client</faultcode>
<faultstring>UPnPError</faultstring>
<detail>
<UPnPError xmlns="urn:schemas-upnp-org:control-1-0">
<errorCode>718</errorCode>
<errorDescription>ConflictInMappingEntry</errorDescription>
</UPnPError>
</detail>
</s:Fault>
</s:Body>
</s:Envelope>
"""

TEST_MISSING_ERROR_DESCRIPTION_ELEMENT = """
    <s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
        <s:Body>
        <s:Fault>
            <faultcode>s:Client</faultcode>
            <faultstring>UPnPError</faultstring>
            <detail>
            <UPnPError xmlns="urn:schemas-upnp-org:control-1-0">
                <errorCode>401</errorCode>
            </UPnPError>
            </detail>
        </s:Fault>
        </s:Body>
    </s:Envelope>
""".strip()

# The first block's controlURL contains the WANPPPConn1 service id.
DESCRIPTION_ID_IN_URL = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
<serviceList>
<service>
<serviceId>urn:upnp-org:serviceId:WANIPConn1</serviceId>
<controlURL>/ctl/urn:upnp-org:serviceId:WANPPPConn1/ip</controlURL>
</service>
<service>
<serviceId>urn:upnp-org:serviceId:WANPPPConn1</serviceId>
<controlURL>/ctl/ppp</controlURL>
</service>
</serviceList>
</root>
"""
