# cart_forest/exceptions.py
"""Exceptions raised by the classification engine."""


class InvalidInputError(ValueError):
    """Malformed dataset, feature vector or parameter."""


class IncompleteModelError(RuntimeError):
    """Prediction requested from a model that cannot produce a label."""
