"""Normalization of PostgreSQL type names to their catalog spellings."""

from __future__ import annotations

from collections.abc import Mapping

__all__ = ["LONG_TYPE_NAMES", "normalize_type_name"]

# SQL-standard spelling -> pg_type.typname
LONG_TYPE_NAMES: Mapping[str, str] = {
    "bigint": "int8",
    "bit varying": "varbit",
    "boolean": "bool",
    "character": "bpchar",
    "character varying": "varchar",
    "decimal": "numeric",
    "double precision": "float8",
    "int": "int4",
    "integer": "int4",
    "real": "float4",
    "smallint": "int2",
    "timestamp without time zone": "timestamp",
    "timestamp with time zone": "timestamptz",
    "time without time zone": "time",
    "time with time zone": "timetz",
}


def normalize_type_name(type_name: str) -> str:
    """Return the short catalog name for `type_name`.

    Names without a known long spelling are returned unchanged, so this
    never fails.

    Example:
        >>> normalize_type_name("timestamp with time zone")
        'timestamptz'
        >>> normalize_type_name("geometry")
        'geometry'
    """
    return LONG_TYPE_NAMES.get(type_name, type_name)
