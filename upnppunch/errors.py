class UPNPError(Exception):
    """
    Base class for all errors raised by upnppunch.
    """

    pass


class BusyError(UPNPError):
    """
    A request arrived while the gateway session was not in a state that can
    accept it, or there is no usable gateway.
    """

    pass


class ResourceExhausted(UPNPError):
    """
    The transport could not allocate a socket.
    """

    pass


class ResolutionFailed(UPNPError):
    """
    Name lookup of the gateway host returned no address.
    """

    pass


class TransportFailed(UPNPError):
    """
    The transport reported a connect or send error.
    """

    pass


class ProtocolMismatch(UPNPError):
    """
    An event arrived in a state that does not expect it. Never fatal.
    """

    pass


class InvalidLocation(UPNPError):
    """
    A LOCATION value could not be split into host, port and path.
    """

    pass


class ErrorCodeDescriptions(object):
    """
    Maps UPnP error codes found in SOAP faults to a human readable
    description. Codes that only belong to a reserved range map to the
    description of that range.
    """

    _ranges = (
        (606, 612, "These ErrorCodes are reserved for UPnP DeviceSecurity."),
        (613, 699, "Common action errors. Defined by UPnP Forum Technical Committee."),
        (700, 799, "Action-specific errors defined by UPnP Forum working committee."),
        (800, 899, "Action-specific errors for non-standard actions. Defined by UPnP vendor."),
    )

    def __init__(self, descriptions):
        self._descriptions = descriptions

    def __getitem__(self, key):
        if not isinstance(key, int):
            raise KeyError("'key' must be an integer")
        try:
            return self._descriptions[key]
        except KeyError:
            pass
        for low, high, description in self._ranges:
            if low <= key <= high:
                return description
        raise KeyError(key)

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default


ERR_CODE_DESCRIPTIONS = ErrorCodeDescriptions({
    401: "Invalid Action",
    402: "Invalid Args",
    404: "Invalid Var",
    501: "Action Failed",
    600: "Argument Value Invalid",
    601: "Argument Value Out of Range",
    602: "Optional Action Not Implemented",
    603: "Out of Memory",
    604: "Human Intervention Required",
    605: "String Argument Too Long",
    # WANPPPConnection / WANIPConnection action errors
    713: "SpecifiedArrayIndexInvalid",
    714: "NoSuchEntryInArray",
    715: "WildCardNotPermittedInSrcIP",
    716: "WildCardNotPermittedInExtPort",
    718: "ConflictInMappingEntry",
    724: "SamePortValuesRequired",
    725: "OnlyPermanentLeasesSupported",
    726: "RemoteHostOnlySupportsWildcard",
    727: "ExternalPortOnlySupportsWildcard",
    728: "NoPortMapsAvailable",
    729: "ConflictWithOtherMechanisms",
})
