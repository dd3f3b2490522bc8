# blogapi/services/payment_service.py
import json
import logging
from typing import Any, Dict, Optional

import stripe
from flask import Flask

from blogapi.core.exceptions import BadRequestError, UpstreamServiceError

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Stripe Checkout gateway.
    Opens hosted checkout sessions for donations and verifies the webhook events Stripe posts back.
    """

    def __init__(self):
        self.secret_key = None
        self.webhook_secret = None
        self.currency = "usd"
        self.client_url = None

    def init_app(self, app: Flask):
        self.webhook_secret = app.config.get('STRIPE_WEBHOOK_SECRET')
        self.currency = app.config.get('STRIPE_CURRENCY', 'usd')
        self.client_url = (app.config.get('CLIENT_URL') or '').rstrip('/')

        self.secret_key = app.config.get('STRIPE_SECRET_KEY')
        if not self.secret_key:
            logger.warning("PaymentService: STRIPE_SECRET_KEY is not set. Checkout sessions are disabled.")
            return
        stripe.api_key = self.secret_key
        logger.info("PaymentService: Stripe client initialized.")

    def create_checkout_session(self, amount: float, post: Dict[str, Any], donor_id: Optional[str]) -> Dict[str, str]:
        """
        Opens a one-off card payment for ``amount`` (major currency units) in favour of the post's author.
        :return: {"url": hosted checkout page, "session_id": ...}
        """
        if not self.secret_key:
            raise UpstreamServiceError("Payments are not configured", error_code="PAYMENTS_NOT_CONFIGURED")

        post_id = post['post_id']
        author_id = post['author']['user_id']
        try:
            session = stripe.checkout.Session.create(
                payment_method_types=['card'],
                line_items=[{
                    'price_data': {
                        'currency': self.currency,
                        'product_data': {
                            'name': 'Blog Donation',
                            'description': f"Support for blog {post['title']}",
                        },
                        'unit_amount': int(round(amount * 100)),
                    },
                    'quantity': 1,
                }],
                mode='payment',
                success_url=f"{self.client_url}/donate-success",
                cancel_url=f"{self.client_url}/donate-cancel",
                metadata={
                    'post_id': post_id,
                    'author_id': author_id,
                    'donor_id': donor_id or '',
                    'amount': str(amount),
                },
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed (post_id: {post_id}): {e}", exc_info=True)
            raise UpstreamServiceError("Payment provider error", error_code="PAYMENT_PROVIDER_ERROR") from e

        logger.info(f"Checkout session opened (session_id: {session.id}, post_id: {post_id})")
        return {"url": session.url, "session_id": session.id}

    def parse_webhook_event(self, payload: str, signature_header: Optional[str]) -> Dict[str, Any]:
        """
        Verifies the ``Stripe-Signature`` header against the raw body and returns the event as a plain dict.
        """
        if not self.webhook_secret:
            raise UpstreamServiceError("Webhook secret is not configured", error_code="PAYMENTS_NOT_CONFIGURED")
        if not signature_header:
            raise BadRequestError("Missing Stripe-Signature header", error_code="INVALID_SIGNATURE")

        try:
            stripe.WebhookSignature.verify_header(
                payload, signature_header, self.webhook_secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE)
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature rejected: {e}")
            raise BadRequestError("Invalid webhook signature", error_code="INVALID_SIGNATURE") from e

        try:
            return json.loads(payload)
        except ValueError as e:
            raise BadRequestError("Invalid webhook payload", error_code="INVALID_PAYLOAD") from e
