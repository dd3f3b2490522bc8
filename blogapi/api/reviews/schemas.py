# blogapi/api/reviews/schemas.py
from marshmallow import Schema, fields, validate

from blogapi.api.posts.schemas import AuthorSchema


class ReviewCreateSchema(Schema):
    """POST /api/v1/reviews/post/{post_id}"""
    rating = fields.Int(required=True, strict=True, validate=validate.Range(
        min=1, max=5, error="Rating must be between 1 and 5"))
    comment = fields.Str(required=False, allow_none=True, validate=validate.Length(max=1000))


class ReviewResponseSchema(Schema):
    review_id = fields.Str(dump_only=True)
    post_id = fields.Str(required=True)
    author = fields.Nested(AuthorSchema, required=True)
    rating = fields.Int(required=True)
    comment = fields.Str()
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime()
