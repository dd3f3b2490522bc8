# blogapi/api/donations/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from blogapi.api.donations.schemas import DonationCreateSchema, DonationResponseSchema
from blogapi.utils.responses import api_response

donations_bp = Blueprint('donations_bp', __name__)


def _listing(result):
    return api_response({
        "donations": DonationResponseSchema(many=True).dump(result['donations']),
        "totalAmount": result['total_amount'],
    }, "Donations fetched successfully")


@donations_bp.route('', methods=['POST'])
@jwt_required()
def create_donation_session():
    """
    Opens a Stripe Checkout session. The donation itself is recorded by the webhook.
    """
    donation_service = current_app.services['donations']
    data = DonationCreateSchema().load(request.get_json(silent=True) or {})
    session = donation_service.start_checkout(get_jwt_identity(), data['post_id'], data['amount'])
    return api_response(session, "Checkout session created", 201)


@donations_bp.route('/webhook', methods=['POST'])
def stripe_webhook():
    # Signature verification needs the body exactly as sent.
    payload = request.get_data(as_text=True)
    event = current_app.services['payments'].parse_webhook_event(payload, request.headers.get('Stripe-Signature'))
    current_app.services['donations'].handle_event(event)
    return api_response({"received": True}, "Webhook received")


@donations_bp.route('/author/<string:author_id>', methods=['GET'])
@jwt_required()
def get_donations_by_author(author_id: str):
    return _listing(current_app.services['donations'].get_donations_by_author(author_id))


@donations_bp.route('/post/<string:post_id>', methods=['GET'])
@jwt_required()
def get_donations_by_post(post_id: str):
    return _listing(current_app.services['donations'].get_donations_by_post(post_id))


@donations_bp.route('/donor/<string:donor_id>', methods=['GET'])
@jwt_required()
def get_donations_by_donor(donor_id: str):
    return _listing(current_app.services['donations'].get_donations_by_donor(donor_id))
