"""
Error hierarchy.

The engine favours total functions; these exceptions are reserved for caller
contract violations that cannot be defaulted around (malformed ratings,
broken catalogs).
"""


class ReadpathError(Exception):
    """Base class for all readpath errors."""
    pass


class RatingValidationError(ReadpathError, ValueError):
    """Raised when a Rating holds non-finite values or an out-of-range RD."""
    pass


class ResponseValidationError(ReadpathError, ValueError):
    """Raised when a graded response carries an invalid item difficulty."""
    pass


class CatalogIntegrityError(ReadpathError, ValueError):
    """Raised when a skill catalog violates level, prerequisite or age invariants."""
    pass
