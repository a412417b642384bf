#!/usr/bin/env python
#
# Open external port 9876 to port 80 of this host through a control channel
# served by server.py, then print the external address.
#

import time

import upnppunch

client = upnppunch.ControlClient("http://127.0.0.1:8109")

while client.scan() == 0:
    time.sleep(0.5)

while client.add_port(None, 80, 9876) != 0:
    time.sleep(0.5)

address = 0
while address <= 0:
    time.sleep(0.5)
    address = client.query_external_address()

print("External address: %d.%d.%d.%d" % (
    address >> 24, (address >> 16) & 0xff, (address >> 8) & 0xff, address & 0xff))
print(client.status())
