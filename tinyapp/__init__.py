"""
TinyApp: a small URL shortener with per-user links and visit tracking.
"""

__version__ = "1.0.0"
