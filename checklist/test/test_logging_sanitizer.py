"""
Test the logging sanitizer utility.
Passwords and tokens must never reach the log files.
"""

from werkzeug.datastructures import ImmutableMultiDict

from checklist.utils.logging_sanitizer import (
    REDACTED,
    SENSITIVE_FIELDS,
    sanitize_dict,
    sanitize_exception_message,
    sanitize_form_data,
)


def test_sanitize_dict():
    result = sanitize_dict({'username': 'admin', 'password': 'secret123', 'email': 'admin@example.com'})
    assert result['username'] == 'admin', "Username should not be redacted"
    assert result['password'] == REDACTED, "Password should be redacted"
    assert result['email'] == 'admin@example.com', "Email should not be redacted"


def test_sanitize_dict_case_insensitive_and_nested():
    result = sanitize_dict({
        'PASSWORD': 'x',
        'Telegram_Bot_Token': 'y',
        'user': {'username': 'admin', 'confirm_password': 'z'},
    })
    assert result['PASSWORD'] == REDACTED
    assert result['Telegram_Bot_Token'] == REDACTED
    assert result['user'] == {'username': 'admin', 'confirm_password': REDACTED}


def test_sanitize_form_data_keeps_multi_values():
    form = ImmutableMultiDict([
        ('username', 'newuser'),
        ('password', 'Secret123'),
        ('confirm_password', 'Secret123'),
        ('sector', 'Lab'),
        ('sector', 'Kitchen'),
    ])
    result = sanitize_form_data(form)
    assert result == {
        'username': 'newuser',
        'password': REDACTED,
        'confirm_password': REDACTED,
        'sector': ['Lab', 'Kitchen'],
    }


def test_sanitize_exception_message():
    assert sanitize_exception_message(ValueError("quantity must be positive")) == "quantity must be positive"
    hidden = sanitize_exception_message(ValueError("bad password for admin"))
    assert 'admin' not in hidden
    assert hidden.startswith('ValueError')


def test_sensitive_fields_cover_credentials():
    for field in ('password', 'csrf_token', 'telegram_bot_token', 'api_key'):
        assert field in SENSITIVE_FIELDS
