"""Raw telegram holder.

A tunnelling request carries a telegram (a cEMI frame) as opaque bytes.
Anything with a get_raw() method returning the current raw bytes can be
used as the message; RawTelegram is the plain-bytes version used when
decoding received frames.
"""


class RawTelegram:
    """A telegram known only by its raw bytes."""

    __slots__ = ("_raw",)

    def __init__(self, raw=b""):
        self._raw = bytes(raw)

    def get_raw(self) -> bytes:
        return self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def __eq__(self, other):
        if not isinstance(other, RawTelegram):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def __repr__(self) -> str:
        return f"<RawTelegram {self._raw.hex(' ')}>"
