"""
Composition of response schemas.

Any mix of single variants, variant lists and already-composed schemas is
flattened into one ComposedSchema whose variant list is the caller's distinct
success variants in order followed by exactly one built-in error variant.
Structurally equal variants are kept once, at their first position.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union

from .SchemaErrors import InvalidSchemaKind
from .SchemaTypes import (
    ERROR_VARIANT,
    ComposedSchema,
    FieldDescriptor,
    FieldKind,
    SchemaInput,
    SchemaVariant,
    SchemaVariantList,
)

SUCCESS_STATUS_FIELD = FieldDescriptor(name="status", kind=FieldKind.STRING, enum=("success",))


class SchemaComposer:
    """Pure functions building ComposedSchema values."""

    @staticmethod
    def compose(*inputs: SchemaInput) -> ComposedSchema:
        """
        Flatten inputs into a single composed schema.

        Args:
            inputs: Variants, variant lists or composed schemas, in order

        Returns:
            ComposedSchema with distinct leaf variants followed by the error variant

        Raises:
            InvalidSchemaKind: If any input is not one of the three accepted kinds
            ValueError: If no success variant remains after flattening
        """
        if not inputs:
            raise ValueError("At least one schema must be supplied")

        leaves: List[SchemaVariant] = []
        for item in inputs:
            leaves.extend(SchemaComposer._leaves(item))

        success: List[SchemaVariant] = []
        for variant in leaves:
            if variant != ERROR_VARIANT and variant not in success:
                success.append(variant)
        if not success:
            raise ValueError("At least one success variant must be supplied")
        return ComposedSchema(variants=tuple(success) + (ERROR_VARIANT,))

    @staticmethod
    def normalize(
        schema: Union[None, SchemaInput, Sequence[SchemaVariant]],
    ) -> Optional[ComposedSchema]:
        """Coerce a caller-supplied schema argument into a composed schema (or None)."""
        if schema is None:
            return None
        if isinstance(schema, ComposedSchema):
            return schema
        if isinstance(schema, (list, tuple)):
            return SchemaComposer.compose(SchemaComposer.variant_list(schema))
        return SchemaComposer.compose(schema)  # type: ignore[arg-type]

    @staticmethod
    def variant_list(items: Sequence[Any]) -> SchemaVariantList:
        """Wrap a plain sequence of variants, rejecting anything else."""
        for item in items:
            if not isinstance(item, SchemaVariant):
                raise InvalidSchemaKind(item)
        return SchemaVariantList(list(items))

    @staticmethod
    def success_variant(fields: Sequence[FieldDescriptor], name: str = "success") -> SchemaVariant:
        """Build a success variant: a ``status`` literal ``"success"`` followed by the caller's fields."""
        return SchemaVariant(name=name, fields=(SUCCESS_STATUS_FIELD,) + tuple(fields))

    @staticmethod
    def result(fields: Sequence[FieldDescriptor], name: str = "success") -> ComposedSchema:
        """Compose a success variant built from ``fields`` with the error variant."""
        return SchemaComposer.compose(SchemaComposer.success_variant(fields, name=name))

    @staticmethod
    def _leaves(item: Any) -> Tuple[SchemaVariant, ...]:
        if isinstance(item, SchemaVariant):
            return (item,)
        elif isinstance(item, SchemaVariantList):
            return tuple(item.root)
        elif isinstance(item, ComposedSchema):
            return item.variants
        raise InvalidSchemaKind(item)
