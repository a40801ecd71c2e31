"""Fixed-width unsigned integers with named sub-fields."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Location of a named field inside a bitfield."""

    offset: int
    width: int = 1

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("offset cannot be negative")
        if self.width <= 0:
            raise ValueError("width must be positive")

    @property
    def mask(self) -> int:
        return ((1 << self.width) - 1) << self.offset


class Bitfield:
    """Unsigned integer decomposed into named ``(offset, width)`` fields.

    Values parse from and render to hexadecimal. Fields may be declared up
    front or later via ``define``; raw ranges are reachable through
    ``read``/``write`` without a name.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldSpec | tuple[int, int] | int] | None = None,
        value: int | str = 0,
    ) -> None:
        self._fields: dict[str, FieldSpec] = {}
        self._value = 0
        for name, spec in (fields or {}).items():
            if isinstance(spec, FieldSpec):
                self._fields[name] = spec
            elif isinstance(spec, int):
                self._fields[name] = FieldSpec(spec)
            else:
                self._fields[name] = FieldSpec(*spec)
        self.value = value

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int | str) -> None:
        if isinstance(value, str):
            raw = value.strip().lower()
            if raw.startswith("0x"):
                raw = raw[2:]
            value = int(raw, 16)
        if value < 0:
            raise ValueError("bitfield value cannot be negative")
        self._value = int(value)

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return MappingProxyType(self._fields)

    def define(self, name: str, offset: int, width: int = 1) -> FieldSpec:
        spec = FieldSpec(offset, width)
        self._fields[name] = spec
        return spec

    def has(self, name: str) -> bool:
        return name in self._fields

    def read(self, offset: int, width: int = 1) -> int:
        return (self._value >> offset) & ((1 << width) - 1)

    def write(self, offset: int, width: int, value: int) -> None:
        value = int(value)
        if value < 0 or value >= 1 << width:
            raise ValueError(f"value {value} does not fit in {width} bit(s)")
        mask = ((1 << width) - 1) << offset
        self._value = (self._value & ~mask) | (value << offset)

    def get(self, name: str) -> int:
        spec = self._spec(name)
        return self.read(spec.offset, spec.width)

    def set(self, name: str, value: int) -> None:
        spec = self._spec(name)
        self.write(spec.offset, spec.width, value)

    def hex(self, pad: int = 0) -> str:
        return format(self._value, "x").rjust(pad, "0")

    def _spec(self, name: str) -> FieldSpec:
        try:
            return self._fields[name]
        except KeyError as exc:
            raise KeyError(f"Bitfield has no field named '{name}'") from exc

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self.hex()})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Bitfield):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


__all__ = ["Bitfield", "FieldSpec"]
