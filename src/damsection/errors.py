"""Exceptions raised by damsection.

Validation findings are never raised: they are returned as GeometryIssue
records. Only malformed input stops a computation.
"""


class DamSectionError(Exception):
    """Base class for all damsection errors."""


class InputError(DamSectionError, ValueError):
    """Contour or parameter input rejected before any computation.

    Attributes:
        errors: Every individual violation found, in discovery order.
    """

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors) if errors else [message]
