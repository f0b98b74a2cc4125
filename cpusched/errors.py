"""
Exceptions raised by the scheduling engine.

Both concrete errors also derive from ``ValueError`` so callers that catch
``ValueError`` around a run keep working.
"""


class SchedulerError(Exception):
    """Base class for every error the engine raises."""


class InvalidInputError(SchedulerError, ValueError):
    """The process set or the policy parameters break a precondition."""


class UnknownPolicyError(SchedulerError, ValueError):
    """The requested policy identifier is not implemented."""
