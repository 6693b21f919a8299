"""
Short Code Generation

Short codes are drawn uniformly at random from the base62 alphabet [0-9a-zA-Z].
The generator keeps no state and knows nothing about existing links: callers
must check the result against live keys and draw again on collision.

With the default length of 6 there are 62**6 (about 5.7e10) possible codes.
A single draw collides with probability n / 62**6 for n live links, about
1.8e-5 at one million links. LinkStore draws again on every collision.
"""

import secrets

BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE62_LENGTH = len(BASE62_CHARS)

DEFAULT_LENGTH = 6


def generate_short_code(length: int = DEFAULT_LENGTH) -> str:
    """
    Generate a random short code.
    
    Args:
        length: Number of characters (default: 6)
    
    Returns:
        A base62 string of exactly `length` characters
    
    Raises:
        ValueError: If length is not positive
    
    Example:
        generate_short_code() -> "b2xVn2"
    """
    if length <= 0:
        raise ValueError(f"Short code length must be positive (given value: {length})")
    return ''.join(secrets.choice(BASE62_CHARS) for _ in range(length))
