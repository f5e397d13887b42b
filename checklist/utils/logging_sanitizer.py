"""
Logging Sanitizer Utility

Redacts passwords, tokens and other secrets from form payloads before they
are written to the log. Used by the auth, user and equipment routes.
"""

from typing import Dict, Any
from werkzeug.datastructures import MultiDict


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'secret_key',
    'token',
    'api_key',
    'bot_token',
    'telegram_bot_token',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
}

REDACTED = '[REDACTED]'


def sanitize_dict(data: Dict[str, Any], redact_text: str = REDACTED) -> Dict[str, Any]:
    """
    Replace sensitive values in a dictionary with redaction text.

    Keys are matched case-insensitively and nested dictionaries are walked.

    Example:
        >>> sanitize_dict({'username': 'admin', 'password': 'secret123'})
        {'username': 'admin', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        else:
            sanitized[key] = value
    return sanitized


def sanitize_form_data(form_data: MultiDict, redact_text: str = REDACTED) -> Dict[str, Any]:
    """
    Sanitize Flask request.form data for safe logging.

    Multi-valued fields (checkbox groups) are kept as lists.
    """
    flattened = {}
    for key in form_data.keys():
        values = form_data.getlist(key)
        flattened[key] = values[0] if len(values) == 1 else values
    return sanitize_dict(flattened, redact_text)


def sanitize_exception_message(exception: Exception) -> str:
    """
    Hide exception messages that mention a sensitive field name.
    """
    message = str(exception)
    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"
    return message
