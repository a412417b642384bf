import unittest

import mock

from upnppunch import ssdp
from upnppunch.errors import InvalidLocation

from tests.const import (
    GATEWAY_LOCATION,
    SSDP_REPLY,
    SSDP_REPLY_LOWERCASE,
    SSDP_REPLY_NO_LOCATION,
)


class TestSSDPRequest(unittest.TestCase):
    def test_request_bytes(self):
        """
        The M-SEARCH datagram should be byte-exact.
        """
        self.assertEqual(
            ssdp.SSDP_REQUEST,
            b"M-SEARCH * HTTP/1.1\r\n"
            b"HOST: 239.255.255.250:1900\r\n"
            b"ST: urn:schemas-upnp-org:device:InternetGatewayDevice:1\r\n"
            b'MAN: "ssdp:discover"\r\n'
            b"MX: 2\r\n",
        )

    def test_custom_search_target(self):
        request = ssdp.ssdp_request("ssdp:all", 5)
        self.assertIn(b"ST: ssdp:all\r\n", request)
        self.assertIn(b"MX: 5\r\n", request)


class TestFindLocation(unittest.TestCase):
    def test_location(self):
        self.assertEqual(ssdp.find_location(SSDP_REPLY), GATEWAY_LOCATION)

    def test_header_name_is_case_sensitive(self):
        """
        A lowercase location header is not recognised.
        """
        self.assertIsNone(ssdp.find_location(SSDP_REPLY_LOWERCASE))

    def test_no_location(self):
        self.assertIsNone(ssdp.find_location(SSDP_REPLY_NO_LOCATION))

    def test_surrounding_whitespace(self):
        reply = b"HTTP/1.1 200 OK\r\nLOCATION:   http://10.0.0.1/igd.xml  \r\n\r\n"
        self.assertEqual(ssdp.find_location(reply), "http://10.0.0.1/igd.xml")

    def test_empty_value(self):
        reply = b"HTTP/1.1 200 OK\r\nLOCATION: \r\n\r\n"
        self.assertIsNone(ssdp.find_location(reply))


class TestAnalyzeLocation(unittest.TestCase):
    def test_host_port_path(self):
        ret = ssdp.analyze_location(GATEWAY_LOCATION)
        self.assertEqual(ret.host, "192.168.1.1")
        self.assertEqual(ret.port, 5431)
        self.assertEqual(ret.path, "/dyndev/uuid:0000e068-20a0-00e0-20a0-48a802086048")
        self.assertEqual(ret.location, GATEWAY_LOCATION)

    def test_default_port(self):
        ret = ssdp.analyze_location("http://router.lan/rootDesc.xml")
        self.assertEqual(ret.host, "router.lan")
        self.assertEqual(ret.port, 80)
        self.assertEqual(ret.path, "/rootDesc.xml")

    def test_no_path(self):
        ret = ssdp.analyze_location("http://10.0.0.138:80")
        self.assertEqual(ret.host, "10.0.0.138")
        self.assertEqual(ret.port, 80)
        self.assertEqual(ret.path, "")

    def test_no_scheme(self):
        ret = ssdp.analyze_location("10.0.0.138:49152/desc.xml")
        self.assertEqual((ret.host, ret.port, ret.path), ("10.0.0.138", 49152, "/desc.xml"))

    def test_invalid(self):
        for location in ("http:///desc.xml", "http://host:abc/", "http://host:0/", "http://host:70000/"):
            self.assertRaises(InvalidLocation, ssdp.analyze_location, location)


class TestDiscovery(unittest.TestCase):
    def test_send_limit(self):
        """
        The query goes out at most max_sends times in total.
        """
        connection = mock.Mock()
        discovery = ssdp.Discovery(max_sends=4)
        results = [discovery.send(connection) for _ in range(6)]
        self.assertEqual(results, [True] * 4 + [False] * 2)
        self.assertEqual(connection.send.call_count, 4)
        connection.send.assert_called_with(ssdp.SSDP_REQUEST)

    def test_reset(self):
        connection = mock.Mock()
        discovery = ssdp.Discovery(max_sends=1)
        discovery.send(connection)
        self.assertFalse(discovery.send(connection))
        discovery.reset()
        self.assertTrue(discovery.send(connection))
