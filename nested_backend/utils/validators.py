import math
from flask import request
from email_validator import validate_email as email_validator, EmailNotValidError

from nested_backend.errors import ValidationError

# Upper bound of the INTEGER primary key columns
MAX_ID = 2147483647


def validate_email(email):
    """Validate email address"""
    try:
        email_validator(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def get_json_body():
    """Return the request body as a dict, or raise ValidationError"""
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')
    return data


def is_blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_id(value, field):
    """Coerce a client-supplied identifier to an integer in the key range"""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if isinstance(value, float):
        # JSON numbers like 5.0 are whole ids; 5.5, nan and inf are not
        if not value.is_integer():
            raise ValidationError(f'{field} must be an integer')
        value = int(value)
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')
    if parsed <= 0 or parsed > MAX_ID:
        raise ValidationError(f'{field} must be between 1 and {MAX_ID}')
    return parsed


def parse_optional_number(value, field):
    """Return a finite float for numeric input, None for missing input"""
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a number')
    if not math.isfinite(number):
        raise ValidationError(f'{field} must be a finite number')
    return number


def parse_optional_string(value, field):
    """Accept a string or null; anything else is a client error"""
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f'{field} must be a string')
