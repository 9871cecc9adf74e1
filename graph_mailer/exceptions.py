"""Errors raised by the sender."""


class GraphMailerError(RuntimeError):
    """Base class for failures that are not plain HTTP responses."""


class TokenAcquisitionError(GraphMailerError):
    """No access token could be obtained from the identity platform."""


class TokenValidationError(GraphMailerError):
    """A supplied access token could not be inspected."""
