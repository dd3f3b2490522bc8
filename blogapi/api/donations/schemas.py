# blogapi/api/donations/schemas.py
from marshmallow import Schema, fields, validate

MIN_AMOUNT = 0.5
MAX_AMOUNT = 10000


class DonationCreateSchema(Schema):
    # Stripe refuses card charges below 0.50 in the major unit.
    amount = fields.Float(required=True, validate=validate.Range(
        min=MIN_AMOUNT, max=MAX_AMOUNT, error="Amount must be between 0.50 and 10000"))
    post_id = fields.Str(required=True, validate=validate.Length(min=1))


class DonationResponseSchema(Schema):
    donation_id = fields.Str(dump_only=True)
    post_id = fields.Str(required=True)
    author_id = fields.Str(required=True)
    donor_id = fields.Str(allow_none=True)
    amount = fields.Float(required=True)
    currency = fields.Str()
    created_at = fields.DateTime(required=True)
