import ipaddress
import logging

import ifaddr


def _getLogger(name):
    """
    Retrieve a logger instance. Handlers are left to the application.
    """
    return logging.getLogger("upnppunch.%s" % name)


def get_addresses_ipv4():
    """
    Return (ip, network_prefix) for every IPv4 address on this machine,
    loopback excluded.
    """
    adapters = ifaddr.get_adapters()
    return list(
        set(
            (addr.ip, addr.network_prefix)
            for iface in adapters
            for addr in iface.ips
            if addr.is_IPv4 and not addr.ip.startswith("127.")
        )
    )


def local_address_for(remote_ip):
    """
    Pick the local IPv4 address that shares a subnet with `remote_ip`. Falls
    back to any non-loopback address, or None when there is none.
    """
    addresses = sorted(get_addresses_ipv4())
    if not addresses:
        return None
    if remote_ip is not None:
        remote = ipaddress.IPv4Address(remote_ip)
        for ip, prefix in addresses:
            network = ipaddress.IPv4Network("%s/%d" % (ip, prefix), strict=False)
            if remote in network:
                return ip
    return addresses[0][0]


def parse_ipv4(value):
    """
    Normalise a dotted string, 4 packed bytes or a 32 bit integer to a dotted
    IPv4 string. Raises ValueError for anything else.
    """
    if isinstance(value, bytearray):
        value = bytes(value)
    if isinstance(value, bytes) and len(value) != 4:
        value = value.decode("ascii").strip()
    if isinstance(value, str):
        value = value.strip()
    return str(ipaddress.IPv4Address(value))


def ipv4_to_int(address):
    return int(ipaddress.IPv4Address(address))


def is_ipv4(value):
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True
