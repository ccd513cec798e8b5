"""PostgreSQL type OIDs and the strategies that resolve them for a column.

Column formats differ in how a column's type OID is obtained. Formats that
ship a textual type descriptor (wal2json-style) resolve it by looking the
parsed type name up in a `TypeRegistry`; formats that carry the OID on the
wire (pgoutput, decoderbufs) simply return it.

Example:
    >>> registry = TypeRegistry()
    >>> registry.get("int4")
    23
    >>> registry.register("geometry", 16385)
    >>> registry.get("geometry")
    16385
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import yaml

from .descriptor import ARRAY_MARKER
from .exceptions import ConfigError, ContractViolationError, UnknownTypeError

if TYPE_CHECKING:
    from .column import ReplicationColumn

__all__ = [
    "PgOid",
    "TypeRegistry",
    "OidResolver",
    "CatalogOidResolver",
    "WireOidResolver",
]

logger = logging.getLogger(__name__)


class PgOid:
    """Built-in PostgreSQL type OIDs, as listed in `pg_type`."""

    # Generic type code reported for any array column
    ARRAY = 2003

    BOOL = 16
    BYTEA = 17
    CHAR = 18
    NAME = 19
    INT8 = 20
    INT2 = 21
    INT4 = 23
    TEXT = 25
    OID = 26
    JSON = 114
    XML = 142
    POINT = 600
    CIDR = 650
    FLOAT4 = 700
    FLOAT8 = 701
    MONEY = 790
    MACADDR = 829
    INET = 869
    BPCHAR = 1042
    VARCHAR = 1043
    DATE = 1082
    TIME = 1083
    TIMESTAMP = 1114
    TIMESTAMPTZ = 1184
    INTERVAL = 1186
    TIMETZ = 1266
    BIT = 1560
    VARBIT = 1562
    NUMERIC = 1700
    UUID = 2950
    JSONB = 3802
    INT4RANGE = 3904
    NUMRANGE = 3906
    TSRANGE = 3908
    TSTZRANGE = 3910
    DATERANGE = 3912
    INT8RANGE = 3926

    BOOL_ARRAY = 1000
    BYTEA_ARRAY = 1001
    INT2_ARRAY = 1005
    INT4_ARRAY = 1007
    TEXT_ARRAY = 1009
    BPCHAR_ARRAY = 1014
    VARCHAR_ARRAY = 1015
    INT8_ARRAY = 1016
    FLOAT4_ARRAY = 1021
    FLOAT8_ARRAY = 1022
    TIMESTAMP_ARRAY = 1115
    DATE_ARRAY = 1182
    TIME_ARRAY = 1183
    TIMESTAMPTZ_ARRAY = 1185
    INTERVAL_ARRAY = 1187
    NUMERIC_ARRAY = 1231
    TIMETZ_ARRAY = 1270
    UUID_ARRAY = 2951
    JSON_ARRAY = 199
    JSONB_ARRAY = 3807


def _builtin_types() -> dict[str, int]:
    types: dict[str, int] = {}
    for attr, value in vars(PgOid).items():
        if not attr.isupper() or attr == "ARRAY":
            continue
        if attr.endswith("_ARRAY"):
            types[ARRAY_MARKER + attr[: -len("_ARRAY")].lower()] = value
        else:
            types[attr.lower()] = value
    return types


class TypeRegistry:
    """Map normalized type names to OIDs.

    Seeded with the built-in types in `PgOid`. Array types are registered
    under their `_`-prefixed catalog names (`_int4` -> 1007), the spelling
    of `TypeDescriptor.normalized_name`, so callers needing the concrete
    array OID can look the normalized name up directly.
    `CatalogOidResolver` only looks up element types.

    Extension and user-defined types (PostGIS, hstore, enums, domains) have database-specific OIDs and
    must be registered explicitly, either in code or from a YAML file:

        types:
          geometry: 16385
          hstore: 16470

    Args:
        types: Extra name -> OID entries layered over the built-ins.
    """

    def __init__(self, types: Mapping[str, int] | None = None) -> None:
        self._types = _builtin_types()
        for name, oid in (types or {}).items():
            self.register(name, oid)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TypeRegistry:
        """Build a registry from a `{"types": {name: oid}}` mapping.

        Raises:
            ConfigError: If the mapping is not shaped as above.
        """
        types = data.get("types", {})
        if types is None:
            types = {}
        if not isinstance(types, Mapping):
            raise ConfigError("'types' must be a mapping of type names to OIDs.")
        for name, oid in types.items():
            valid_oid = isinstance(oid, int) and not isinstance(oid, bool)
            if not isinstance(name, str) or not valid_oid:
                raise ConfigError(
                    f"Invalid registry entry {name!r}: {oid!r}. "
                    "Expected a type name mapped to an integer OID."
                )
        return cls(types)

    @classmethod
    def from_yaml(cls, path: str | Path) -> TypeRegistry:
        """Build a registry from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or is malformed.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read type registry '{path}': {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Type registry '{path}' did not parse to a dictionary.")
        registry = cls.from_mapping(data)
        logger.info(f"Loaded type registry from {path} ({len(registry)} types)")
        return registry

    def register(self, name: str, oid: int) -> None:
        if oid <= 0:
            raise ConfigError(f"OID for '{name}' must be a positive integer, not {oid}.")
        self._types[name] = oid

    def get(self, name: str) -> int:
        """Return the OID registered for `name`.

        Raises:
            UnknownTypeError: If no OID is registered.
        """
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


class OidResolver(Protocol):
    """Resolve the element type OID of a column."""

    def resolve(self, column: ReplicationColumn) -> int: ...


class CatalogOidResolver:
    """Resolve OIDs by looking up the column's parsed type name.

    Used by formats that ship a textual type descriptor. For array columns
    the element type is looked up.
    """

    def __init__(self, registry: TypeRegistry | None = None) -> None:
        self.registry = registry if registry is not None else TypeRegistry()

    def resolve(self, column: ReplicationColumn) -> int:
        if not column.has_metadata:
            raise ContractViolationError(
                f"Column '{column.name}' has no type descriptor to resolve an OID from."
            )
        descriptor = column.get_metadata()
        name = descriptor.normalized_name
        if descriptor.is_array:
            name = name[len(ARRAY_MARKER) :]
        return self.registry.get(name)


class WireOidResolver:
    """Return an OID that was sent along with the column."""

    def __init__(self, oid: int) -> None:
        self.oid = oid

    def resolve(self, column: ReplicationColumn) -> int:
        return self.oid
