"""
Input validation utilities
"""
import re

E164_PATTERN = re.compile(r"^\+[1-9]\d{7,14}$")
TICKET_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def validate_ticket_code(code: str) -> bool:
    """Human-readable ticket codes are short alphanumeric tokens"""
    return bool(code) and TICKET_CODE_PATTERN.match(code) is not None


def validate_phone_number(phone: str) -> bool:
    """
    Validate E.164 phone number format

    Args:
        phone: Phone number to validate

    Returns:
        True if valid E.164 format
    """
    return E164_PATTERN.match(phone or "") is not None


def sanitize_input(text: str, max_length: int = 1600) -> str:
    """
    Sanitize user input

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    # Remove null bytes
    text = text.replace('\x00', '')

    # Truncate to max length
    if len(text) > max_length:
        text = text[:max_length]

    return text.strip()
