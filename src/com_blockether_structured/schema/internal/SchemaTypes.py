"""
Type definitions for response schemas.

Schemas are plain declarative data: a variant is an ordered list of typed
field descriptors, and a composed schema is a flat list of variants of which
exactly one must match. Rendering to JSON Schema is a pure function of the data.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

JsonPrimitive = Union[str, int, float, bool]


class FieldKind(str, Enum):
    """JSON types a field may take."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class FieldDescriptor(BaseModel):
    """A single named field of an expected JSON object."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Property name in the JSON object")
    kind: FieldKind = Field(description="JSON type of the property")
    description: Optional[str] = Field(default=None, description="Human-readable meaning shown to the model")
    required: bool = Field(default=True, description="Whether the property must be present")
    enum: Optional[Tuple[JsonPrimitive, ...]] = Field(default=None, description="Allowed literal values")
    items: Optional[FieldKind] = Field(default=None, description="Element type for array fields")
    fields: Optional[Tuple["FieldDescriptor", ...]] = Field(
        default=None,
        description="Nested fields for object fields, or for arrays whose elements are objects",
    )

    @model_validator(mode="after")
    def _check_nesting(self) -> "FieldDescriptor":
        if self.items is not None and self.kind != FieldKind.ARRAY:
            raise ValueError(f"Field '{self.name}': 'items' is only valid for array fields")
        if self.fields is not None and self.kind not in (FieldKind.ARRAY, FieldKind.OBJECT):
            raise ValueError(f"Field '{self.name}': nested 'fields' require an array or object field")
        if self.items is not None and self.fields is not None:
            raise ValueError(f"Field '{self.name}': use either 'items' or 'fields', not both")
        return self

    def to_json_schema(self) -> Dict[str, Any]:
        """Render this field as a JSON Schema property."""
        schema: Dict[str, Any] = {"type": self.kind.value}

        if self.kind == FieldKind.ARRAY:
            if self.fields is not None:
                schema["items"] = object_json_schema(self.fields)
            elif self.items is not None:
                schema["items"] = {"type": self.items.value}
        elif self.kind == FieldKind.OBJECT:
            schema.update(object_json_schema(self.fields or ()))

        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.description:
            schema["description"] = self.description.strip()
        return schema


def object_json_schema(
    fields: Tuple[FieldDescriptor, ...],
    allow_additional_properties: bool = False,
) -> Dict[str, Any]:
    """Render an ordered set of fields as a JSON Schema object."""
    names = [f.name for f in fields]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate field names: {', '.join(duplicates)}")

    return {
        "type": "object",
        "properties": {f.name: f.to_json_schema() for f in fields},
        "required": [f.name for f in fields if f.required],
        "additionalProperties": allow_additional_properties,
    }


FieldDescriptor.model_rebuild()


class SchemaVariant(BaseModel):
    """One candidate JSON object shape a reply may validate against."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Variant name used in violation reports")
    fields: Tuple[FieldDescriptor, ...] = Field(default=(), description="Ordered field descriptors")
    allow_additional_properties: bool = Field(
        default=False,
        description="Whether properties not listed in fields are tolerated",
    )

    @field_validator("fields")
    @classmethod
    def _unique_field_names(cls, fields: Tuple[FieldDescriptor, ...]) -> Tuple[FieldDescriptor, ...]:
        seen = set()
        for descriptor in fields:
            if descriptor.name in seen:
                raise ValueError(f"Duplicate field name: {descriptor.name}")
            seen.add(descriptor.name)
        return fields

    def to_json_schema(self) -> Dict[str, Any]:
        """Render this variant as an object JSON Schema."""
        return object_json_schema(self.fields, self.allow_additional_properties)


class SchemaVariantList(RootModel[List[SchemaVariant]]):
    """An ordered list of variants that has not been composed yet."""

    root: List[SchemaVariant] = Field(default_factory=list)


class ComposedSchema(BaseModel):
    """A flat union of variants with exactly-one-must-match semantics."""

    model_config = ConfigDict(frozen=True)

    variants: Tuple[SchemaVariant, ...] = Field(min_length=1, description="Leaf variants in order")

    def to_json_schema(self) -> Dict[str, Any]:
        """Render as a JSON Schema ``oneOf`` document."""
        return {"oneOf": [variant.to_json_schema() for variant in self.variants]}

    def to_json(self) -> str:
        """JSON text embedded into prompts."""
        return json.dumps(self.to_json_schema())

    @property
    def error_variants(self) -> List[SchemaVariant]:
        """Variants that describe the built-in error shape."""
        return [variant for variant in self.variants if variant == ERROR_VARIANT]

    @property
    def success_variants(self) -> List[SchemaVariant]:
        """All variants other than the built-in error shape."""
        return [variant for variant in self.variants if variant != ERROR_VARIANT]


# Closed set of inputs accepted by composition
SchemaInput = Union[SchemaVariant, SchemaVariantList, ComposedSchema]


ERROR_VARIANT = SchemaVariant(
    name="error",
    fields=(
        FieldDescriptor(name="status", kind=FieldKind.STRING, enum=("error",)),
        FieldDescriptor(
            name="message",
            kind=FieldKind.STRING,
            description="A brief description of the reason you could not fulfill the request.",
        ),
    ),
)
