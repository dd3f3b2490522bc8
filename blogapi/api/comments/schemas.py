# blogapi/api/comments/schemas.py
from marshmallow import Schema, fields, validate

from blogapi.api.posts.schemas import AuthorSchema  # same author summary as posts

_content = dict(required=True, validate=validate.Length(min=1, max=500, error="Comment must be 1-500 characters."))


class CommentCreateSchema(Schema):
    """POST /api/v1/comments"""
    content = fields.Str(**_content)
    post_id = fields.Str(required=True)
    parent_id = fields.Str(required=False, allow_none=True, load_default=None)


class CommentUpdateSchema(Schema):
    """PUT /api/v1/comments/{comment_id}"""
    content = fields.Str(**_content)


class ReplySchema(Schema):
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    parent_id = fields.Str(allow_none=True)
    author = fields.Nested(AuthorSchema, required=True)
    content = fields.Str(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime()


class CommentResponseSchema(ReplySchema):
    # filled for top-level comments in thread listings
    replies = fields.List(fields.Nested(ReplySchema), dump_only=True)
