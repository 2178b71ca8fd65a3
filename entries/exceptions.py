# entries/exceptions.py
from core.exceptions import AwardsError


class InvalidTransitionError(AwardsError):
    status_code = 409
    default_message = "That step is not available from the current step."


class PaymentGatewayError(AwardsError):
    """ The payment service could not be reached or refused the request. """
    status_code = 502
    default_message = "The payment service is unavailable. Please try again."


class WebhookSignatureError(AwardsError):
    default_message = "Webhook signature verification failed."
