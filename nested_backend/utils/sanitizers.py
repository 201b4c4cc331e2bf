import bleach


def sanitize_string(text):
    """Sanitize a string by removing HTML tags and stripping whitespace"""
    if text is None:
        return ''

    text = bleach.clean(str(text), tags=[], strip=True)
    return text.strip()


def sanitize_optional(text):
    """Like sanitize_string, but keeps missing or blank values as None"""
    if text is None:
        return None
    cleaned = sanitize_string(text)
    return cleaned or None
