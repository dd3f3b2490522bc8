# blogapi/api/posts/schemas.py
from marshmallow import Schema, fields, validate, pre_load

# --- nested schemas ---
class AuthorSchema(Schema):
    """Author summary embedded in posts, comments and reviews."""
    user_id = fields.Str(required=True)
    username = fields.Str(required=True)
    full_name = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True)


# --- request/response schemas ---
class PostCreateSchema(Schema):
    """POST /api/v1/blogs"""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    content = fields.Str(required=True, validate=validate.Length(min=1))
    image = fields.Str(required=False, allow_none=True)
    description = fields.Str(required=False, allow_none=True, validate=validate.Length(max=300))
    category = fields.Str(required=False, allow_none=True, validate=validate.Length(max=50))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=30)), required=False,
                       validate=validate.Length(max=10))

    @pre_load
    def normalize(self, data, **kwargs):
        """Strips title/content and accepts tags as a comma separated string."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ('title', 'content'):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        if isinstance(data.get('tags'), str):
            data['tags'] = [t.strip() for t in data['tags'].split(',') if t.strip()]
        return data


class PostUpdateSchema(PostCreateSchema):
    """
    PUT /api/v1/blogs/{post_id}
    Title and content are always required. The other fields keep their stored values when omitted.
    """


class PostResponseSchema(Schema):
    post_id = fields.Str(dump_only=True)
    author = fields.Nested(AuthorSchema, required=True)
    title = fields.Str(required=True)
    content = fields.Str(required=True)
    image = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    category = fields.Str(allow_none=True)
    tags = fields.List(fields.Str())
    views = fields.Int(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)

    # only filled on single-post reads
    comments_count = fields.Int(dump_only=True)
    reviews_count = fields.Int(dump_only=True)
