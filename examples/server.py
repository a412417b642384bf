#!/usr/bin/env python
#
# Serve the gateway control channel over HTTP on port 8109. Pass the URL of
# the gateway's device description to skip SSDP discovery.
#

import logging
import sys

from aiohttp import web

import upnppunch

logging.basicConfig(level=logging.DEBUG)

gateway = upnppunch.Gateway(upnppunch.AsyncioTransport())
app = upnppunch.create_app(upnppunch.ControlChannel(gateway))


async def scan(app):
    gateway.scan(location=sys.argv[1] if len(sys.argv) > 1 else None)

app.on_startup.append(scan)

web.run_app(app, host="127.0.0.1", port=8109)
