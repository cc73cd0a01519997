"""Error taxonomy for the GenAI Gateway.

Only :class:`ValidationError` carries a message meant for the caller.  Every
other failure, including :class:`RemoteServiceError` and local ``OSError``,
is reported to the caller as a generic internal error.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ValidationError(GatewayError):
    """Malformed or missing request input.

    The message is returned to the caller verbatim.
    """


class RemoteServiceError(GatewayError):
    """The generative model service failed to produce a response."""


class ConfigurationError(GatewayError):
    """Required configuration is missing at startup."""
