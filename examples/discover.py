#!/usr/bin/env python
#
# Find the gateway with SSDP and show what was learned about it.
#

import asyncio
import logging

import upnppunch

logging.basicConfig(level=logging.INFO)


async def main():
    gateway = upnppunch.Gateway(upnppunch.AsyncioTransport())
    gateway.scan()
    for _ in range(100):
        if gateway.state in (upnppunch.State.READY, upnppunch.State.IDLE):
            break
        await asyncio.sleep(0.1)
    print(gateway.status())
    gateway.reset()

asyncio.run(main())
