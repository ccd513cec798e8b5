"""Replication message columns with lazily parsed type metadata.

A column-format adapter creates one `ReplicationColumn` per column per change
event. The raw type descriptor is only parsed when metadata is first needed,
and the result is kept for the lifetime of the column.

Columns are not thread-safe. They are meant to be created and consumed while
processing a single event on a single thread.

Example:
    >>> from pgtypemeta.oids import TypeRegistry
    >>> column = text_column("price", "numeric(12,3)", True, TypeRegistry())
    >>> column.get_oid_type()
    1700
    >>> column.get_metadata().scale
    3
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from .descriptor import TypeDescriptor, TypeDescriptorParser
from .exceptions import ContractViolationError
from .oids import CatalogOidResolver, PgOid, TypeRegistry, WireOidResolver

if TYPE_CHECKING:
    from .oids import OidResolver

__all__ = [
    "Unparsed",
    "Parsed",
    "MetadataState",
    "ReplicationColumn",
    "text_column",
    "wire_column",
]


@dataclass(frozen=True)
class Unparsed:
    """Metadata has not been requested yet."""


@dataclass(frozen=True)
class Parsed:
    """Metadata was parsed from the raw descriptor."""

    descriptor: TypeDescriptor


MetadataState = Unparsed | Parsed

UNPARSED = Unparsed()
_DEFAULT_PARSER = TypeDescriptorParser()


class ReplicationColumn:
    """A column of a replication message.

    Args:
        name: Column name.
        type_string: Raw type descriptor, e.g. `character varying(255)`.
            May be None when `has_metadata` is False.
        optional: Whether the column is nullable.
        has_metadata: Whether `type_string` can be parsed into metadata.
            Set by the column-format adapter.
        oid_resolver: Format-specific strategy resolving the element OID.
        parser: Parser used for the raw descriptor.
    """

    def __init__(
        self,
        name: str,
        type_string: str | None,
        optional: bool,
        has_metadata: bool,
        oid_resolver: OidResolver,
        *,
        parser: TypeDescriptorParser | None = None,
    ) -> None:
        if has_metadata and type_string is None:
            raise ContractViolationError(
                f"Column '{name}' claims metadata but has no type descriptor."
            )
        self._name = name
        self._type_string = type_string
        self._optional = optional
        self._has_metadata = has_metadata
        self._oid_resolver = oid_resolver
        self._parser = parser or _DEFAULT_PARSER
        self._state: MetadataState = UNPARSED

    @property
    def name(self) -> str:
        return self._name

    @property
    def type_string(self) -> str | None:
        return self._type_string

    @property
    def has_metadata(self) -> bool:
        return self._has_metadata

    @property
    def is_parsed(self) -> bool:
        return isinstance(self._state, Parsed)

    def is_optional(self) -> bool:
        return self._optional

    def get_metadata(self) -> TypeDescriptor:
        """Return the parsed type metadata, parsing on first access.

        Raises:
            ContractViolationError: If the column has no metadata.
            ParseError: If the raw descriptor cannot be parsed.
        """
        if not self._has_metadata:
            raise ContractViolationError(
                f"Metadata not available for column '{self._name}'.",
                suggestions=["Check 'has_metadata' before requesting metadata"],
            )
        if isinstance(self._state, Parsed):
            return self._state.descriptor
        type_string = cast(str, self._type_string)
        descriptor = self._parser.parse(
            type_string, column_name=self._name, nullable=self._optional
        )
        self._state = Parsed(descriptor)
        return descriptor

    def get_oid_type(self) -> int:
        """Return the type OID; `PgOid.ARRAY` for array columns."""
        if self._has_metadata and self.get_metadata().is_array:
            return PgOid.ARRAY
        return self._oid_resolver.resolve(self)

    def get_component_oid_type(self) -> int:
        """Return the element type OID of an array column.

        Raises:
            ContractViolationError: If the column has no metadata or is
                not an array.
        """
        if not self.get_metadata().is_array:
            raise ContractViolationError(
                f"Column '{self._name}' of type '{self._type_string}' is not an array."
            )
        return self._oid_resolver.resolve(self)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self._name!r}, "
            f"type_string={self._type_string!r}, optional={self._optional!r})"
        )


def text_column(
    name: str,
    type_string: str,
    optional: bool,
    registry: TypeRegistry | None = None,
) -> ReplicationColumn:
    """Create a column for formats that ship a textual type descriptor."""
    return ReplicationColumn(
        name,
        type_string,
        optional,
        True,
        CatalogOidResolver(registry),
    )


def wire_column(
    name: str,
    oid: int,
    optional: bool,
    type_string: str | None = None,
) -> ReplicationColumn:
    """Create a column for formats that carry the type OID on the wire.

    Metadata is only obtainable when `type_string` is given.
    """
    return ReplicationColumn(
        name,
        type_string,
        optional,
        type_string is not None,
        WireOidResolver(oid),
    )
