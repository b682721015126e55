"""
Input validation schemas using Pydantic
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cvstudio.utils.exceptions import ValidationError


class RenderRequest(BaseModel):
    """Validation schema for PDF and thumbnail render requests"""
    templateKey: Optional[str] = Field(None, max_length=100, description="Template key or alias")
    data: dict = Field(default_factory=dict, description="CV data (personal info and sections)")
    settings: Optional[dict] = Field(None, description="Style settings")
    title: Optional[str] = Field(None, max_length=200, description="Document title used for the PDF metadata")

    @field_validator('templateKey')
    @classmethod
    def validate_template_key(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class PaginationRequest(RenderRequest):
    """Validation schema for pagination requests"""
    scrollOffset: Optional[float] = Field(None, ge=0, description="Viewport scroll offset in preview pixels")


def validate_request(schema_class: type[BaseModel], data: dict, raise_on_error: bool = True):
    """
    Validate request data against a Pydantic schema.

    Args:
        schema_class: Pydantic model class
        data: Request data to validate
        raise_on_error: If True, raise ValidationError. If False, return (is_valid, errors)

    Returns:
        If raise_on_error=True: Validated data dict
        If raise_on_error=False: (is_valid: bool, validated_data: dict, errors: list)
    """
    if not isinstance(data, dict):
        errors = ["body: Request body must be a JSON object"]
        if raise_on_error:
            raise ValidationError(errors[0], details={'validation_errors': errors})
        return False, {}, errors

    try:
        validated = schema_class(**data)
        if raise_on_error:
            return validated.model_dump(exclude_none=True)
        else:
            return True, validated.model_dump(exclude_none=True), []
    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        # Convert Pydantic validation errors to our ValidationError
        errors = []
        if hasattr(e, 'errors'):
            for error in e.errors():
                field = '.'.join(str(x) for x in error.get('loc', []))
                message = error.get('msg', 'Validation error')
                errors.append(f"{field}: {message}")

        error_message = '; '.join(errors) if errors else str(e)

        if raise_on_error:
            raise ValidationError(error_message, details={'validation_errors': errors})
        else:
            return False, {}, errors
