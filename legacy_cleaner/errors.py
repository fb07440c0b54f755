"""Root of the typed exception hierarchy.

Every package-level error inherits from CleanerError so callers can catch
any application error with a single except clause.
"""


class CleanerError(Exception):
    """Base exception for all legacy-html-cleaner errors."""
    pass
