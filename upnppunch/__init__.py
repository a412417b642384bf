# Copyright (c) 2026, upnppunch contributors
# Portions copyright (c) 2012-2016, Ferry Boender <ferry.boender@gmail.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
This module provides a minimal UPnP Internet Gateway Device (IGD) control
point for hosts that need a TCP port forwarded on their router, and nothing
more. It implements just enough of SSDP (Simple Service Discovery Protocol),
device description retrieval and SOAP (Simple Object Access Protocol) to add
and remove port mappings and to learn the router's external address.

The flow for working with a gateway is:

- Discover the gateway using SSDP.

  An M-SEARCH request for InternetGatewayDevice is multicast on the local
  network (and repeated a few times). The first reply carrying a LOCATION
  header points at the gateway's device description. If you already know
  that URL, pass it to Gateway.scan() and discovery is skipped.

- Read the device description.

  The description is fetched over HTTP/1.0 and scanned for the
  WANPPPConnection service and its control URL. No XML parser is involved;
  the scan only looks for the few markers it needs.

- Call actions using SOAP.

  AddPortMapping, DeletePortMapping and GetExternalIPAddress requests are
  POSTed to the control URL. Every call returns immediately; the external
  address is picked up by polling Gateway.query_external_address() again.

Everything runs on one thread. The Gateway holds a single session and talks
to the network through a Transport, which reports connects, data, sent
buffers and disconnects as events. AsyncioTransport is the asyncio
implementation.

Classes:

* Gateway: The control point and its state machine.
* AsyncioTransport: Non-blocking sockets on an asyncio event loop.
* ControlChannel: Integer-valued command interface to a Gateway.
* ControlClient: HTTP client for a ControlChannel served with create_app().

The following example finds the gateway, forwards external port 9876 to
port 80 of this host and prints the external address:

------------------------------------------------------------------------------
import asyncio
import upnppunch

async def main():
    gateway = upnppunch.Gateway(upnppunch.AsyncioTransport())
    gateway.scan()
    while gateway.state != upnppunch.State.READY:
        await asyncio.sleep(0.1)
    gateway.add_port(None, 80, 9876)
    while gateway.state != upnppunch.State.READY:
        await asyncio.sleep(0.1)
    address = gateway.query_external_address()
    while address is None:
        await asyncio.sleep(0.1)
        address = gateway.query_external_address()
    print(address)

asyncio.run(main())
------------------------------------------------------------------------------

Useful Links:

* http://upnp.org/specs/arch/UPnP-arch-DeviceArchitecture-v1.1.pdf
* http://upnp.org/specs/gw/UPnP-gw-WANPPPConnection-v1-Service.pdf
"""
from upnppunch import const, errors, scanner, soap, ssdp, upnp, util  # noqa: F401
from .connection import Connection, Event, EventType
from .errors import (
    UPNPError, BusyError, ResourceExhausted, ResolutionFailed, TransportFailed,
    ProtocolMismatch, InvalidLocation)
from .rpc import ControlChannel, ControlClient, create_app
from .soap import SOAPError
from .transport import AsyncioTransport, Transport
from .upnp import Gateway, GatewaySession, State

__all__ = [
    "Gateway", "GatewaySession", "State", "Connection", "Event", "EventType",
    "Transport", "AsyncioTransport", "ControlChannel", "ControlClient", "create_app",
    "UPNPError", "BusyError", "ResourceExhausted", "ResolutionFailed", "TransportFailed",
    "ProtocolMismatch", "InvalidLocation", "SOAPError",
]
