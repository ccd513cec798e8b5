from __future__ import annotations

from pgtypemeta.exceptions import (
    ConfigError,
    ContractViolationError,
    ParseError,
    PgTypeMetaError,
    UnknownTypeError,
)


def test_error_without_suggestions():
    assert str(PgTypeMetaError("boom")) == "boom"


def test_error_with_suggestions():
    error = PgTypeMetaError("boom", suggestions=["first", "second"])
    assert str(error) == "boom | first; second"


def test_hierarchy():
    for error_cls in (ParseError, ContractViolationError, UnknownTypeError, ConfigError):
        assert issubclass(error_cls, PgTypeMetaError)


def test_parse_error_message():
    error = ParseError("col1", "foo(")
    assert str(error).startswith("Failed to parse column type 'foo(' for column col1")
    assert error.suggestions


def test_unknown_type_custom_suggestions():
    error = UnknownTypeError("hstore", suggestions=["Install the extension"])
    assert str(error) == "Unknown type: 'hstore'. | Install the extension"
