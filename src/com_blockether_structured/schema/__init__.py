"""
Schema module - declarative response shapes for structured model replies.

This module provides field helpers, variants and flat one-of compositions
that always include the built-in error shape, plus validation of parsed
JSON values against them.
"""

from .internal.SchemaComposer import SchemaComposer
from .internal.SchemaErrors import InvalidSchemaKind, StructuredOutputError
from .internal.SchemaTypes import (
    ERROR_VARIANT,
    ComposedSchema,
    FieldDescriptor,
    FieldKind,
    SchemaInput,
    SchemaVariant,
    SchemaVariantList,
)
from .internal.SchemaValidation import SchemaValidation
from .SchemaCore import SchemaCore

__all__ = [
    # Main Components
    "SchemaCore",
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
