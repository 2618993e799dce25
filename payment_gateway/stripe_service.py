import logging

import stripe

logger = logging.getLogger(__name__)


class PaymentProcessorError(Exception):
    pass


class StripeProcessor:
    """Creates PaymentIntents, sending its own API key with every request."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    def create_payment_intent(self, amount, currency: str):
        try:
            return stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.debug("Stripe rejected PaymentIntent: %r", e)
            raise PaymentProcessorError(message) from e
