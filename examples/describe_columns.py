"""Print parsed metadata for the type descriptors a decoding plugin emits."""

import logging

from pgtypemeta import ParseError, TypeRegistry, text_column

logging.basicConfig(level=logging.DEBUG)

COLUMNS = [
    ("id", "integer"),
    ("name", "character varying(255)"),
    ("price", "numeric(12,3)"),
    ("area", "geometry(MultiPolygon,4326)"),
    ("created_at", "timestamp (12) with time zone"),
    ("ids", "int[]"),
    ("shape", "myschema.geometry"),
    ("legacy_ids", "_int4"),
    ("broken", "not a valid type ("),
]


def main() -> None:
    registry = TypeRegistry({"geometry": 16385})
    for name, type_string in COLUMNS:
        column = text_column(name, type_string, True, registry)
        try:
            descriptor = column.get_metadata()
        except ParseError as e:
            print(f"{name}: {e}")
            continue
        print(
            f"{name}: schema={descriptor.schema} base={descriptor.base_type!r} "
            f"normalized={descriptor.normalized_name!r} array={descriptor.is_array} "
            f"length={descriptor.length} scale={descriptor.scale} "
            f"oid={column.get_oid_type()}"
        )


if __name__ == "__main__":
    main()
