class PaymentError(RuntimeError):
    """Raised when the payment provider rejects or fails a request."""
    pass


class PaymentConfigurationError(RuntimeError):
    """Raised when payment credentials are missing."""
    pass


class WebhookSignatureError(ValueError):
    """Raised when a webhook payload fails signature verification."""
    pass


class FormRelayError(RuntimeError):
    """Raised when the form backend does not accept a submission."""
    pass


class WizardTransitionError(ValueError):
    """Raised when a booking wizard action is not allowed on the current step."""
    pass


class UnknownServiceError(LookupError):
    pass


class EmptySelectionError(ValueError):
    pass
