"""
Validation of parsed JSON values against response schemas.

Thin wrapper over the ``jsonschema`` library. Validators are created per call
and hold no state between calls, so re-validating an accepted value always
gives the same answer.
"""

from typing import Any, Dict, List

from jsonschema import Draft202012Validator, validators

from .SchemaTypes import ComposedSchema


class SchemaValidation:
    """Schema-validation collaborator used by response extraction."""

    @staticmethod
    def validate(json_schema: Dict[str, Any], value: Any) -> bool:
        """Return True when ``value`` conforms to ``json_schema``."""
        validator_cls = validators.validator_for(json_schema, default=Draft202012Validator)
        return bool(validator_cls(json_schema).is_valid(value))

    @staticmethod
    def explain_violations(json_schema: Dict[str, Any], value: Any) -> List[str]:
        """
        Describe every violation of ``json_schema`` found in ``value``.

        Returns:
            Human-readable strings of the form ``"<json path>: <message>"``,
            empty when the value is valid
        """
        validator_cls = validators.validator_for(json_schema, default=Draft202012Validator)
        errors = sorted(
            validator_cls(json_schema).iter_errors(value),
            key=lambda e: [str(part) for part in e.absolute_path],
        )
        return [f"{error.json_path}: {error.message}" for error in errors]

    @staticmethod
    def matches_any(schema: ComposedSchema, value: Any) -> bool:
        """True when ``value`` validates against at least one variant of ``schema``."""
        return any(SchemaValidation.validate(variant.to_json_schema(), value) for variant in schema.variants)

    @staticmethod
    def explain_composed(schema: ComposedSchema, value: Any) -> List[str]:
        """List violations against every variant, each prefixed with the variant name."""
        violations: List[str] = []
        for variant in schema.variants:
            for violation in SchemaValidation.explain_violations(variant.to_json_schema(), value):
                violations.append(f"[{variant.name}] {violation}")
        return violations
