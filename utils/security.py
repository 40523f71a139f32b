"""
Security utilities for TrueFrame
Provides the declared-size gate, input validation and client identification
"""
import re
from typing import Any, Dict, Optional, Union

from flask import request
import logging

from core.analyzer import MEDIA_TYPES, AnalysisRequest
from core.exceptions import ValidationError
from core.fetcher import is_oversized

logger = logging.getLogger(__name__)

BODY_SIZE_LIMIT = 10 * 1024 * 1024

# ==================== BODY SIZE ====================

def is_oversized_request(content_length: Optional[Union[str, int]], limit: int = BODY_SIZE_LIMIT) -> bool:
    """Check a declared Content-Length against the body ceiling"""
    if content_length is None:
        return False
    return is_oversized(str(content_length), limit)

# ==================== INPUT VALIDATION ====================

class InputValidator:
    """
    Schema-based input validator
    """

    MAX_STRING_LENGTH = 256
    MAX_URL_LENGTH = 2048
    # Base64 inflates payloads by a third
    MAX_DATA_URL_LENGTH = BODY_SIZE_LIMIT * 4 // 3 + 256

    DATA_URL_PREFIX = re.compile(r'^data:[^;,]+;base64,', re.IGNORECASE)

    @staticmethod
    def validate_string(value: Any, field_name: str, max_length: int = MAX_STRING_LENGTH,
                        required: bool = True, allowed_values=None, strip: bool = True) -> str:
        """Validate string input: type, emptiness, length and allowed values"""
        if value is None:
            if required:
                raise ValidationError(f"{field_name} is required", field_name)
            return ""

        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string", field_name)

        if strip:
            value = value.strip()

        if not value and required:
            raise ValidationError(f"{field_name} cannot be empty", field_name)

        if len(value) > max_length:
            raise ValidationError(
                f"{field_name} exceeds maximum length of {max_length} characters",
                field_name
            )

        if allowed_values is not None and value not in allowed_values:
            raise ValidationError(
                f"{field_name} must be one of: {', '.join(map(str, allowed_values))}",
                field_name
            )

        return value

    @staticmethod
    def validate_url(value: Any, field_name: str, required: bool = True) -> str:
        """Validate a remote http(s) URL"""
        value = InputValidator.validate_string(
            value, field_name, max_length=InputValidator.MAX_URL_LENGTH, required=required
        )

        if not value and not required:
            return ""

        if not (value.lower().startswith('http://') or value.lower().startswith('https://')):
            raise ValidationError(f"{field_name} must be a valid URL (http:// or https://)", field_name)

        return value

    @staticmethod
    def validate_data_url(value: Any, field_name: str, required: bool = True) -> str:
        """Validate a base64 ``data:`` URL prefix"""
        value = InputValidator.validate_string(
            value, field_name, max_length=InputValidator.MAX_DATA_URL_LENGTH, required=required
        )

        if not value and not required:
            return ""

        if not InputValidator.DATA_URL_PREFIX.match(value):
            raise ValidationError("Invalid data URL", field_name)

        return value

    @staticmethod
    def validate_json_schema(data: Any, schema: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Validate JSON data against schema

        Schema format:
        {
            "field_name": {
                "type": "string|url|data_url",
                "required": True/False,
                "max_length": int,
                "allowed_values": [list],
                "strip": True/False,
                "message": "error message overriding the default"
            }
        }
        """
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        validated = {}
        for field_name, field_schema in schema.items():
            field_type = field_schema.get('type', 'string')
            required = field_schema.get('required', True)
            value = data.get(field_name)

            try:
                if field_type == 'url':
                    result = InputValidator.validate_url(value, field_name, required=required)
                elif field_type == 'data_url':
                    result = InputValidator.validate_data_url(value, field_name, required=required)
                else:
                    result = InputValidator.validate_string(
                        value, field_name,
                        max_length=field_schema.get('max_length', InputValidator.MAX_STRING_LENGTH),
                        required=required,
                        allowed_values=field_schema.get('allowed_values'),
                        strip=field_schema.get('strip', True),
                    )
            except ValidationError as e:
                if 'message' in field_schema:
                    raise ValidationError(field_schema['message'], field_name) from e
                raise

            if result:
                validated[field_name] = result

        return validated


ANALYSIS_SCHEMA = {
    'mediaType': {
        'type': 'string',
        'required': True,
        'allowed_values': list(MEDIA_TYPES),
        'strip': False,
        'message': "mediaType must be image or frame",
    },
    'dataUrl': {'type': 'data_url', 'required': False},
}


def validate_analysis_payload(data: Any) -> AnalysisRequest:
    """
    Validate a decoded /analyze body and build the engine request
    ``url`` is only looked at when no dataUrl was supplied.
    """
    validated = InputValidator.validate_json_schema(data, ANALYSIS_SCHEMA)
    if not validated.get('dataUrl'):
        url = InputValidator.validate_url(data.get('url'), 'url', required=False)
        if not url:
            raise ValidationError("Provide either dataUrl or url")
        validated['url'] = url
    return AnalysisRequest.from_dict(validated)

# ==================== SECURITY HELPERS ====================

def get_client_ip() -> str:
    """Get client identifier, handling proxies"""
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded and forwarded.split(',')[0].strip():
        # Take the first IP in the chain
        return forwarded.split(',')[0].strip()
    if request.headers.get('X-Real-IP'):
        return request.headers.get('X-Real-IP')
    return request.remote_addr or 'anonymous'
