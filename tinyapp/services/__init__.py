"""
Services module for business logic separation.

This module contains the in-memory stores that hold all application state,
keeping it separate from the web routes and templates.
"""

from tinyapp.services.link_store import LinkStore
from tinyapp.services.shortcode import generate_short_code
from tinyapp.services.user_directory import UserDirectory

__all__ = [
    "LinkStore",
    "UserDirectory",
    "generate_short_code",
]
