"""Errors raised by the KNXnet/IP codec."""


class MalformedPacketError(ValueError):
    """A received buffer violates the KNXnet/IP framing rules.

    Raised only while parsing or decoding. The message names the failed
    check and the offending value so the caller can log and drop the
    datagram.
    """
