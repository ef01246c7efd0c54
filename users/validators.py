"""
Field rules shared by signup, admin user creation and store creation.

Every validator returns None when the value is acceptable, otherwise a
message suitable for showing next to the form field.
"""
import re

NAME_MIN = 20
NAME_MAX = 60
ADDRESS_MAX = 400
STORE_NAME_MAX = 100
PASSWORD_MIN = 8
PASSWORD_MAX = 16

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
UPPERCASE_RE = re.compile(r'[A-Z]')
SPECIAL_RE = re.compile(r'[^A-Za-z0-9]')


def validate_name(name):
    if not name:
        return 'Name is required'
    if len(name) < NAME_MIN:
        return f'Name must be at least {NAME_MIN} characters'
    if len(name) > NAME_MAX:
        return f'Name must be at most {NAME_MAX} characters'
    return None


def validate_store_name(name):
    if not name:
        return 'Name is required'
    if len(name) > STORE_NAME_MAX:
        return f'Name must be at most {STORE_NAME_MAX} characters'
    return None


def validate_address(address):
    if not address:
        return 'Address is required'
    if len(address) > ADDRESS_MAX:
        return f'Address must be at most {ADDRESS_MAX} characters'
    return None


def validate_email(email):
    if not email:
        return 'Email is required'
    if not EMAIL_RE.match(email):
        return 'Email is invalid'
    return None


def validate_password(password):
    if not password:
        return 'Password is required'
    if len(password) < PASSWORD_MIN or len(password) > PASSWORD_MAX:
        return f'Password must be {PASSWORD_MIN}-{PASSWORD_MAX} characters long'
    if not UPPERCASE_RE.search(password):
        return 'Password must include at least one uppercase letter'
    if not SPECIAL_RE.search(password):
        return 'Password must include at least one special character'
    return None


def collect_validation_errors(checks):
    """
    Run each zero-argument check and gather the failures.

    Args:
        checks: mapping of field name -> callable returning a message or None

    Returns:
        dict of field -> message for failing fields, or None if all passed
    """
    errors = {}
    for field, check in checks.items():
        message = check()
        if message:
            errors[field] = message
    return errors or None
