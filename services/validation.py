from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Mapping, TypeVar
from pydantic import BaseModel, ValidationError
from models.auth import FIELD_ERROR_MESSAGES, FormReply

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class Submission(Generic[SchemaT]):
    """
    Result of parsing one raw form submission against a schema.

    Exactly one of `value` / `field_errors` is populated, depending on
    `status`.
    """
    status: Literal["success", "error"]
    value: SchemaT | None = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def reply(self, field_errors: dict[str, list[str]] | None = None) -> FormReply:
        """
        Build the action reply. Extra `field_errors` turn any submission into
        an error reply (used for service failures after a valid parse).
        """
        errors = {**self.field_errors, **(field_errors or {})}
        if errors:
            return FormReply(status="error", field_errors=errors)
        return FormReply(status="success")


def _clean_form(raw: Mapping[str, Any]) -> dict[str, Any]:
    # Untouched HTML inputs arrive as "", which counts as missing.
    return {key: value for key, value in raw.items() if value != ""}


def _translate_errors(exc: ValidationError) -> dict[str, list[str]]:
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "message"
        messages = FIELD_ERROR_MESSAGES.get(name, {})
        text = messages.get(error["type"]) or messages.get("default") or error["msg"]
        bucket = field_errors.setdefault(name, [])
        if text not in bucket:
            bucket.append(text)
    return field_errors


def parse_submission(schema: type[SchemaT], raw: Mapping[str, Any]) -> Submission[SchemaT]:
    """Validate raw form fields. Pure: no I/O, no hidden state."""
    try:
        value = schema.model_validate(_clean_form(raw))
    except ValidationError as e:
        return Submission(status="error", field_errors=_translate_errors(e))
    return Submission(status="success", value=value)


def schema_constraints(schema: type[BaseModel]) -> dict[str, dict[str, Any]]:
    """
    HTML input constraints (required / minlength / maxlength / type) derived
    from a schema, so pages render the same rules the server enforces.
    """
    constraints: dict[str, dict[str, Any]] = {}
    for name, info in schema.model_fields.items():
        attrs: dict[str, Any] = {"required": info.is_required()}
        for meta in info.metadata:
            if getattr(meta, "min_length", None) is not None:
                attrs["minlength"] = meta.min_length
            if getattr(meta, "max_length", None) is not None:
                attrs["maxlength"] = meta.max_length
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        attrs["type"] = extra.get("input_type", "text")
        constraints[name] = attrs
    return constraints
