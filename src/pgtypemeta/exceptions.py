"""Custom pgtypemeta exceptions."""

from __future__ import annotations


class PgTypeMetaError(Exception):
    """Root of the errors raised while describing replication columns.

    Parsing, OID resolution and configuration failures all derive from it,
    so embedding code can stop processing an event with a single handler.
    Each error may name the operator action that resolves it; those hints
    are appended to the message after a ` | `.

    Attributes:
        suggestions: Operator actions that resolve the error.
    """

    def __init__(
        self,
        message: str,
        suggestions: list[str] | None = None,
    ):
        super().__init__(message)
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        result = super().__str__()

        if self.suggestions:
            suggestions_text = "; ".join(self.suggestions)
            result += f" | {suggestions_text}"

        return result


class ParseError(PgTypeMetaError):
    """A raw type descriptor does not match the replication type grammar.

    Usually means a malformed or unsupported descriptor, or a mismatch
    between the decoding plugin and this library's expectations.

    Attributes:
        column_name: Name of the column the descriptor belongs to.
        type_string: The offending raw descriptor.
    """

    def __init__(self, column_name: str, type_string: str):
        self.column_name = column_name
        self.type_string = type_string
        super().__init__(
            f"Failed to parse column type '{type_string}' for column {column_name}",
            suggestions=[
                "Check that the decoding plugin version matches the connector version"
            ],
        )


class ContractViolationError(PgTypeMetaError):
    """An operation was called in a state where it is not valid.

    Raised for programming defects such as requesting the component type of
    a non-array column. Never retried or recovered.
    """


class UnknownTypeError(PgTypeMetaError):
    """No OID is known for a type name.

    Raised by OID resolution strategies when the registry has no mapping.
    """

    def __init__(self, type_name: str, suggestions: list[str] | None = None):
        self.type_name = type_name
        super().__init__(
            f"Unknown type: '{type_name}'.",
            suggestions=suggestions
            or [f"Register an OID for '{type_name}' in the type registry"],
        )


class ConfigError(PgTypeMetaError):
    """Invalid configuration values or malformed configuration files."""
