"""Parse raw replication type descriptors into structured metadata.

Logical decoding plugins that emit textual column types report them the way
`format_type()` renders them, e.g.:

- `text`
- `character varying(255)`
- `numeric(12,3)`
- `geometry(MultiPolygon,4326)`
- `timestamp (12) with time zone`
- `int[]`
- `myschema.geometry`
- `_int4` (legacy array spelling)

The parenthesized modifier list is overloaded: it holds a length, a
precision and scale, or a spatial subtype and SRID depending on the base
type. This module does not interpret it beyond a positional, lenient
extraction of `length` and `scale`.

Example:
    >>> from pgtypemeta.descriptor import parse_type_descriptor
    >>> descriptor = parse_type_descriptor("numeric(12,3)")
    >>> descriptor.length, descriptor.scale
    (12, 3)
    >>> parse_type_descriptor("_int4").normalized_name
    '_int4'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from .exceptions import ParseError
from .normalizer import normalize_type_name

__all__ = [
    "ARRAY_MARKER",
    "TypeDescriptor",
    "TypeDescriptorParser",
    "parse_type_descriptor",
]

logger = logging.getLogger(__name__)

ARRAY_MARKER = "_"

TYPE_PATTERN = re.compile(
    r"(?P<schema>[^.(]+\.)?"
    r"(?P<full>(?P<base>[^(\[]+)(?:\((?P<mod>.+)\))?(?P<suffix>[^()\[\]]*?))"
    r"(?P<array>\[\])?"
)
TYPEMOD_SEPARATOR = re.compile(r"\s*,\s*")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class TypeDescriptor:
    """Structured view of a column's type descriptor.

    Args:
        schema: Schema qualifying the type, without the trailing dot.
        base_type: Type name without modifiers, including trailing words
            such as `with time zone`.
        full_type: Type name including the original modifier text.
        normalized_name: Catalog short name, prefixed with `_` for arrays.
        is_array: Whether the column holds an array.
        length: First modifier, when it is an integer.
        scale: Second modifier, when it is an integer.
        modifiers: Raw modifier tokens in their original order.
        nullable: Nullability of the owning column.
    """

    base_type: str
    full_type: str
    normalized_name: str
    is_array: bool = False
    schema: str | None = None
    length: int | None = None
    scale: int | None = None
    modifiers: tuple[str, ...] = ()
    nullable: bool = True

    @property
    def schema_prefix(self) -> str:
        if self.schema is not None:
            return self.schema + "."
        return ""

    @property
    def base_type_with_schema(self) -> str:
        return self.schema_prefix + self.base_type

    @property
    def full_type_with_schema(self) -> str:
        return self.schema_prefix + self.full_type

    def __str__(self) -> str:
        suffix = "[]" if self.is_array else ""
        return f"{self.full_type_with_schema}{suffix}"


class TypeDescriptorParser:
    """Parse replication type strings into `TypeDescriptor` instances.

    Args:
        normalizer: Total function mapping a base type name to its catalog
            spelling. Defaults to `normalize_type_name`.
    """

    def __init__(self, normalizer: Callable[[str], str] | None = None) -> None:
        self._normalizer = normalizer or normalize_type_name

    def parse(
        self,
        type_string: str,
        *,
        column_name: str = "<unknown>",
        nullable: bool = True,
    ) -> TypeDescriptor:
        """Parse a raw type descriptor.

        Args:
            type_string: Descriptor as emitted by the decoding plugin.
            column_name: Owning column, used in error reporting.
            nullable: Nullability carried over to the descriptor.

        Returns:
            The parsed `TypeDescriptor`.

        Raises:
            ParseError: If `type_string` does not match the type grammar.
        """
        match = TYPE_PATTERN.fullmatch(type_string)
        base_type = match.group("base").strip() if match else ""
        if match is None or not base_type.removeprefix(ARRAY_MARKER):
            logger.error(
                f"Failed to parse column type for {column_name} '{type_string}'"
            )
            raise ParseError(column_name, type_string)

        full_type = match.group("full")
        suffix = (match.group("suffix") or "").strip()
        if suffix:
            base_type = f"{base_type} {suffix}"

        modifiers: tuple[str, ...] = ()
        if match.group("mod") is not None:
            modifiers = _split_modifiers(match.group("mod"))

        is_array = match.group("array") is not None
        if base_type.startswith(ARRAY_MARKER):
            # Legacy spelling, e.g. "_int4" for int4[]
            base_type = base_type[len(ARRAY_MARKER) :].strip()
            full_type = full_type.lstrip()[len(ARRAY_MARKER) :].lstrip()
            is_array = True

        normalized_name = self._normalizer(base_type)
        if is_array:
            normalized_name = ARRAY_MARKER + normalized_name

        schema = match.group("schema")
        if schema is not None:
            schema = schema[:-1]

        descriptor = TypeDescriptor(
            base_type=base_type,
            full_type=full_type,
            normalized_name=normalized_name,
            is_array=is_array,
            schema=schema,
            length=_modifier_as_int(modifiers, 0),
            scale=_modifier_as_int(modifiers, 1),
            modifiers=modifiers,
            nullable=nullable,
        )
        logger.debug(f"Parsed column type for {column_name} '{type_string}'")
        return descriptor


def _split_modifiers(modifier_text: str) -> tuple[str, ...]:
    tokens = [token.strip() for token in TYPEMOD_SEPARATOR.split(modifier_text)]
    while tokens and not tokens[-1]:
        tokens.pop()
    return tuple(tokens)


def _modifier_as_int(modifiers: tuple[str, ...], position: int) -> int | None:
    """Return the modifier at `position` as an int, or None.

    Non-numeric tokens and values outside the 32-bit range are skipped
    without error, so for `geometry(MultiPolygon,4326)` the SRID ends up in
    `scale`.
    """
    if len(modifiers) <= position:
        return None
    token = modifiers[position]
    if INTEGER_PATTERN.fullmatch(token) is None:
        return None
    value = int(token)
    if not INT32_MIN <= value <= INT32_MAX:
        return None
    return value


_default_parser = TypeDescriptorParser()


def parse_type_descriptor(
    type_string: str,
    *,
    column_name: str = "<unknown>",
    nullable: bool = True,
) -> TypeDescriptor:
    """Parse `type_string` with the default normalizer.

    See `TypeDescriptorParser.parse` for arguments and errors.
    """
    return _default_parser.parse(
        type_string, column_name=column_name, nullable=nullable
    )
