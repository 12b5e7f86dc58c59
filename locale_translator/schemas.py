"""
Wire schemas for the translate endpoint.

Both the client and the Flask service validate payloads through these
models, so malformed bodies fail with SchemaValidationError at the boundary.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, field_validator

from locale_translator.exceptions import SchemaValidationError


class TranslateRequest(BaseModel):
    """Body of POST /api/translate."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source_data: Dict[str, str] = Field(alias="sourceData")
    target_lang: str = Field(alias="targetLang", min_length=1)

    @field_validator("source_data")
    @classmethod
    def _keys_not_empty(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key in value:
            if not key or any(not part for part in key.split(".")):
                raise ValueError(f"invalid key path '{key}'")
        return value

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class FlatLocaleMapModel(RootModel[Dict[str, str]]):
    """Successful translate response: a flat key -> string map."""


class ErrorResponse(BaseModel):
    """Failed translate response."""

    error: str
    code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "body"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


def parse_translate_request(payload: Any) -> TranslateRequest:
    """
    Validate an inbound request body.

    Raises:
        SchemaValidationError: If required fields are missing or mistyped
    """
    if not isinstance(payload, dict):
        raise SchemaValidationError("Missing required fields", details={"reason": "body must be a JSON object"})
    try:
        return TranslateRequest.model_validate(payload)
    except ValidationError as e:
        raise SchemaValidationError("Missing required fields", details={"reason": _describe(e)})


def parse_translate_response(payload: Any) -> Dict[str, str]:
    """
    Validate a successful response body.

    Raises:
        SchemaValidationError: If the body is not a flat string map
    """
    try:
        return FlatLocaleMapModel.model_validate(payload).root
    except ValidationError as e:
        raise SchemaValidationError("Malformed translation response", details={"reason": _describe(e)})


def parse_error_response(payload: Any) -> Optional[ErrorResponse]:
    """Return the error body if the payload is one, else None."""
    if not isinstance(payload, dict):
        return None
    try:
        return ErrorResponse.model_validate(payload)
    except ValidationError:
        return None
