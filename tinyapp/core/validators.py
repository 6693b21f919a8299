"""
Form and path input checks, applied before anything reaches the stores.
"""

import re
from typing import Optional

# generated codes are 6 base62 characters; anything longer than 20 is noise
SHORT_CODE_RE = re.compile(r"[0-9a-zA-Z]{1,20}")


def is_blank(value: Optional[str]) -> bool:
    """
    Check whether a form value is missing, empty or whitespace-only.
    
    Args:
        value: The submitted value (None when the field was absent)
    
    Returns:
        True if the value carries no content
    """
    return value is None or not value.strip()


def is_short_code(value: str) -> bool:
    return SHORT_CODE_RE.fullmatch(value) is not None
