"""Exceptions related to rabbitmq-operator."""

__all__ = [
    "RabbitmqOperatorException",
    "InputException",
]


class RabbitmqOperatorException(Exception):
    """Generic base exception used for this library."""


class InputException(RabbitmqOperatorException):
    """Raised when the input files or objects are not formatted as expected."""
