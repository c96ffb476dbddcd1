"""Schema of the trade Cap'n Proto file: struct layouts and enum values."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field as dc_field
from types import MappingProxyType
from typing import Mapping

FILE_ID = 0xD4B6E00623BED170
FILE_NAME = "trade.capnp"


class FieldType(str, enum.Enum):
    """Wire type of a struct field."""

    INT32 = "int32"
    UINT16 = "uint16"
    FLOAT64 = "float64"
    TEXT = "text"
    ENUM = "enum"
    STRUCT = "struct"
    LIST = "list"

    @property
    def in_pointer_section(self) -> bool:
        """Whether values of this type live in the pointer section."""
        return self in (FieldType.TEXT, FieldType.STRUCT, FieldType.LIST)


@dataclass(frozen=True)
class FieldSchema:
    """One slot field of a struct.

    ``offset`` counts elements of the field's own width in the data section,
    or pointer indices for pointer fields. ``type_id`` names the enum, the
    struct, or the list element struct the field refers to.
    """

    name: str
    code_order: int
    type: FieldType
    offset: int
    type_id: int | None = None

    @property
    def in_pointer_section(self) -> bool:
        """Whether the field is stored in the pointer section."""
        return self.type.in_pointer_section


@dataclass(frozen=True)
class StructSchema:
    """Layout of one struct type."""

    id: int
    name: str
    data_words: int
    pointer_count: int
    fields: tuple[FieldSchema, ...]
    _by_name: Mapping[str, FieldSchema] = dc_field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", MappingProxyType({f.name: f for f in self.fields}))

    @property
    def display_name(self) -> str:
        """Name qualified by the schema file, as the compiler records it."""
        return f"{FILE_NAME}:{self.name}"

    @property
    def members_by_name(self) -> tuple[FieldSchema, ...]:
        """Fields sorted by name."""
        return tuple(sorted(self.fields, key=lambda f: f.name))

    def field(self, name: str) -> FieldSchema:
        """Return the field with the given name; raise KeyError if there is none."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"{self.name} has no field {name!r}") from None


@dataclass(frozen=True)
class EnumSchema:
    """Enumerants of one enum type, in code order."""

    id: int
    name: str
    enumerants: tuple[str, ...]

    @property
    def display_name(self) -> str:
        """Name qualified by the schema file, as the compiler records it."""
        return f"{FILE_NAME}:{self.name}"

    @property
    def members_by_name(self) -> tuple[str, ...]:
        """Enumerant names sorted alphabetically."""
        return tuple(sorted(self.enumerants))

    def value_of(self, name: str) -> int:
        """Return the numeric value of the named enumerant; raise KeyError if unknown."""
        try:
            return self.enumerants.index(name)
        except ValueError:
            raise KeyError(f"{self.name} has no enumerant {name!r}") from None

    def name_of(self, value: int) -> str:
        """Return the name of the enumerant with the given value; raise KeyError if unknown."""
        if isinstance(value, bool) or not 0 <= int(value) < len(self.enumerants):
            raise KeyError(f"{self.name} has no enumerant with value {value!r}")
        return self.enumerants[int(value)]


ORDER_SIDE = EnumSchema(0xCEAF67D5278E9B08, "OrderSide", ("buy", "sell"))
ORDER_TYPE = EnumSchema(0x8A1823B59B807011, "OrderType", ("market", "limit", "stop"))

ORDER = StructSchema(
    0xEC26D82684AC6CE6,
    "Order",
    3,
    1,
    (
        FieldSchema("id", 0, FieldType.INT32, 0),
        FieldSchema("symbol", 1, FieldType.TEXT, 0),
        FieldSchema("side", 2, FieldType.ENUM, 2, ORDER_SIDE.id),
        FieldSchema("type", 3, FieldType.ENUM, 3, ORDER_TYPE.id),
        FieldSchema("price", 4, FieldType.FLOAT64, 1),
        FieldSchema("volume", 5, FieldType.FLOAT64, 2),
    ),
)

BALANCE = StructSchema(
    0x956AAB4DB434F8AF,
    "Balance",
    1,
    1,
    (
        FieldSchema("currency", 0, FieldType.TEXT, 0),
        FieldSchema("amount", 1, FieldType.FLOAT64, 0),
    ),
)

ACCOUNT = StructSchema(
    0xDEA92A2F26E352C7,
    "Account",
    1,
    3,
    (
        FieldSchema("id", 0, FieldType.INT32, 0),
        FieldSchema("name", 1, FieldType.TEXT, 0),
        FieldSchema("wallet", 2, FieldType.STRUCT, 1, BALANCE.id),
        FieldSchema("orders", 3, FieldType.LIST, 2, ORDER.id),
    ),
)

_STRUCTS = (ORDER, BALANCE, ACCOUNT)
_ENUMS = (ORDER_SIDE, ORDER_TYPE)


def _lookup(items, key, kind):
    for item in items:
        if isinstance(key, int) and not isinstance(key, bool):
            if item.id == key:
                return item
        elif key in (item.name, item.display_name):
            return item
    raise KeyError(f"unknown {kind} {key!r}")


def struct_schema(name: str | int) -> StructSchema:
    """Return the struct schema by short name, qualified name or id."""
    return _lookup(_STRUCTS, name, "struct")


def enum_schema(name: str | int) -> EnumSchema:
    """Return the enum schema by short name, qualified name or id."""
    return _lookup(_ENUMS, name, "enum")