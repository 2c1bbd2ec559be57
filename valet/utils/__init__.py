"""
Utility functions
"""
from valet.utils.logger import setup_logger, get_logger
from valet.utils.validators import (
    validate_ticket_code,
    validate_phone_number,
    sanitize_input
)

__all__ = [
    "setup_logger",
    "get_logger",
    "validate_ticket_code",
    "validate_phone_number",
    "sanitize_input",
]
