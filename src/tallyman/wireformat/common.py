"""Shared wire-format pieces: the base model, error bodies and renamed-field decoding."""

from typing import Any, Dict, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

USER_VALIDATION_FAILED_CODE = "user validation failed"


class WireModel(BaseModel):
    """Base for wire entities: immutable once decoded, keyed by wire names."""

    model_config = ConfigDict(
        populate_by_name=True, frozen=True, protected_namespaces=()
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        # services encode empty lists and maps as null
        field = cls.model_fields.get(info.field_name or "")
        if value is None and field is not None:
            origin = get_origin(field.annotation)
            if origin in (list, dict):
                return origin()
        return value

    def to_wire(self) -> Dict[str, Any]:
        """Encode to the JSON-ready mapping sent on the wire."""
        return self.model_dump(by_alias=True, mode="json")


class ErrorResponse(WireModel):
    """Body of every non-2xx response."""

    code: str = Field("", description="Machine-readable error code")
    error: str = Field("", description="Human-readable error message")


def resolve_renamed(data: Any, canonical: str, alternate: str) -> Any:
    """Fold a renamed wire field into its canonical name.

    The canonical field wins; the alternate is used only when the canonical
    one is absent or empty. Non-mapping input is returned untouched so the
    model's own validation reports it.
    """
    if not isinstance(data, dict) or alternate not in data:
        return data
    resolved = dict(data)
    alternate_value = resolved.pop(alternate)
    if not resolved.get(canonical):
        resolved[canonical] = alternate_value
    return resolved
