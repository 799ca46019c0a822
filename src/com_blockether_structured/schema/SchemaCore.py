"""
Core module for response schema functionality.

This module provides the main entry point for describing the JSON shapes a
model reply may take: field helpers, variants, and flat one-of compositions
that always carry the built-in error shape.
"""

from typing import Any, Optional, Sequence, Union

from .internal.SchemaComposer import SchemaComposer
from .internal.SchemaTypes import (
    ERROR_VARIANT,
    ComposedSchema,
    FieldDescriptor,
    FieldKind,
    SchemaVariant,
    SchemaVariantList,
)


class SchemaCore:
    @staticmethod
    def string(
        name: str,
        description: Optional[str] = None,
        required: bool = True,
        enum: Optional[Sequence[str]] = None,
    ) -> FieldDescriptor:
        """Create a string field, optionally restricted to ``enum`` values."""
        return FieldDescriptor(
            name=name,
            kind=FieldKind.STRING,
            description=description,
            required=required,
            enum=tuple(enum) if enum is not None else None,
        )

    @staticmethod
    def integer(name: str, description: Optional[str] = None, required: bool = True) -> FieldDescriptor:
        return FieldDescriptor(name=name, kind=FieldKind.INTEGER, description=description, required=required)

    @staticmethod
    def number(name: str, description: Optional[str] = None, required: bool = True) -> FieldDescriptor:
        return FieldDescriptor(name=name, kind=FieldKind.NUMBER, description=description, required=required)

    @staticmethod
    def boolean(name: str, description: Optional[str] = None, required: bool = True) -> FieldDescriptor:
        return FieldDescriptor(name=name, kind=FieldKind.BOOLEAN, description=description, required=required)

    @staticmethod
    def array(
        name: str,
        of: Union[FieldKind, str, Sequence[FieldDescriptor], None] = None,
        description: Optional[str] = None,
        required: bool = True,
    ) -> FieldDescriptor:
        """Create an array field.

        Args:
            name: Property name
            of: Element kind (e.g. ``"string"``), or a sequence of fields when
                the elements are objects. ``None`` leaves elements untyped.
            description: Meaning shown to the model
            required: Whether the property must be present

        Returns:
            FieldDescriptor for the array
        """
        if of is None:
            return FieldDescriptor(name=name, kind=FieldKind.ARRAY, description=description, required=required)
        if isinstance(of, (FieldKind, str)):
            return FieldDescriptor(
                name=name,
                kind=FieldKind.ARRAY,
                items=FieldKind(of),
                description=description,
                required=required,
            )
        return FieldDescriptor(
            name=name,
            kind=FieldKind.ARRAY,
            fields=tuple(of),
            description=description,
            required=required,
        )

    @staticmethod
    def object(
        name: str,
        fields: Sequence[FieldDescriptor],
        description: Optional[str] = None,
        required: bool = True,
    ) -> FieldDescriptor:
        """Create a nested object field."""
        return FieldDescriptor(
            name=name,
            kind=FieldKind.OBJECT,
            fields=tuple(fields),
            description=description,
            required=required,
        )

    @staticmethod
    def literal(name: str, value: str, description: Optional[str] = None) -> FieldDescriptor:
        """Create a required string field that only accepts ``value``."""
        return FieldDescriptor(
            name=name,
            kind=FieldKind.STRING,
            enum=(value,),
            description=description,
        )

    @staticmethod
    def variant(
        name: str,
        fields: Sequence[FieldDescriptor],
        allow_additional_properties: bool = False,
    ) -> SchemaVariant:
        """Create a standalone variant (no implicit ``status`` field)."""
        return SchemaVariant(
            name=name,
            fields=tuple(fields),
            allow_additional_properties=allow_additional_properties,
        )

    @staticmethod
    def result(*fields: FieldDescriptor, name: str = "success") -> ComposedSchema:
        """Compose the standard success/error response schema.

        The success variant carries ``status: "success"`` followed by ``fields``;
        the error variant carries ``status: "error"`` and ``message``.

        Args:
            fields: Caller-specific fields of the success shape
            name: Name of the success variant

        Returns:
            ComposedSchema of ``[success, error]``
        """
        return SchemaComposer.result(fields, name=name)

    @staticmethod
    def any_one_of(*schemas: Any) -> ComposedSchema:
        """Flatten variants, lists of variants and composed schemas into one schema.

        Raises:
            InvalidSchemaKind: If any argument is of an unsupported kind
        """
        inputs = [SchemaComposer.variant_list(s) if isinstance(s, (list, tuple)) else s for s in schemas]
        return SchemaComposer.compose(*inputs)

    @staticmethod
    def error_variant() -> SchemaVariant:
        """The built-in error variant."""
        return ERROR_VARIANT
