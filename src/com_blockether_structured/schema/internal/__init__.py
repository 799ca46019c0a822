"""Internal components for response schemas."""

from .SchemaComposer import SchemaComposer
from .SchemaErrors import InvalidSchemaKind, StructuredOutputError
from .SchemaTypes import (
    ERROR_VARIANT,
    ComposedSchema,
    FieldDescriptor,
    FieldKind,
    SchemaInput,
    SchemaVariant,
    SchemaVariantList,
)
from .SchemaValidation import SchemaValidation

__all__ = [
    # Composition
    "SchemaComposer",
    "SchemaValidation",
    # Types
    "ComposedSchema",
    "ERROR_VARIANT",
    "FieldDescriptor",
    "FieldKind",
    "SchemaInput",
    "SchemaVariant",
    "SchemaVariantList",
    # Errors
    "InvalidSchemaKind",
    "StructuredOutputError",
]
