"""
Web layer: HTML routes, session helpers and JSON schemas.
"""
