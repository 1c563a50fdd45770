from email_validator import validate_email, EmailNotValidError

from utils.errors import ValidationError


def require_fields(data, keys):
    """Return ``data`` if every key holds a non-blank string, else raise ValidationError"""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    missing = [key for key in keys if not data.get(key)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    not_text = [key for key in keys if not isinstance(data[key], str) or not data[key].strip()]
    if not_text:
        raise ValidationError(f"Fields must be non-empty text: {', '.join(not_text)}")
    return data


def normalize_email(value, field='email'):
    """Validate an e-mail address and return its normalized form"""
    try:
        valid = validate_email((value or '').strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid {field}: {str(e)}")
    return valid.normalized
