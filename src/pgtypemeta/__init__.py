from .column import ReplicationColumn, text_column, wire_column
from .commit_policy import CommitPolicyConfig, OffsetCommitPolicy, always, periodic
from .descriptor import TypeDescriptor, TypeDescriptorParser, parse_type_descriptor
from .exceptions import (
    ConfigError,
    ContractViolationError,
    ParseError,
    PgTypeMetaError,
    UnknownTypeError,
)
from .normalizer import normalize_type_name
from .oids import CatalogOidResolver, PgOid, TypeRegistry, WireOidResolver

__all__ = [
    "ReplicationColumn",
    "text_column",
    "wire_column",
    "CommitPolicyConfig",
    "OffsetCommitPolicy",
    "always",
    "periodic",
    "TypeDescriptor",
    "TypeDescriptorParser",
    "parse_type_descriptor",
    "ConfigError",
    "ContractViolationError",
    "ParseError",
    "PgTypeMetaError",
    "UnknownTypeError",
    "normalize_type_name",
    "CatalogOidResolver",
    "PgOid",
    "TypeRegistry",
    "WireOidResolver",
]
