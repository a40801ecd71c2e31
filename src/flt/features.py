"""Document feature bitset."""

from __future__ import annotations

from .bitfield import Bitfield, FieldSpec
from .constants import DEFAULT_FEATURES, F_DCMETA, bit_offset


class Features(Bitfield):
    """Feature flags declared in a document header."""

    def __init__(self, value: int | str = DEFAULT_FEATURES) -> None:
        super().__init__({"DCMETA": FieldSpec(bit_offset(F_DCMETA))}, value)

    @property
    def dcmeta(self) -> bool:
        return bool(self.get("DCMETA"))

    @dcmeta.setter
    def dcmeta(self, enabled: bool) -> None:
        self.set("DCMETA", int(bool(enabled)))


__all__ = ["Features"]
