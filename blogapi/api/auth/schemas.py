# blogapi/api/auth/schemas.py
from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class RegisterSchema(Schema):
    """POST /api/v1/users/register"""
    username = fields.Str(required=True, validate=validate.Regexp(
        r'^[A-Za-z0-9_.-]{3,30}$',
        error="Username must be 3-30 characters: letters, digits, '_', '.', '-'."))
    email = fields.Email(required=True)
    full_name = fields.Str(required=True, validate=validate.Length(min=1, max=80))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=8, max=128))
    avatar_url = fields.URL(required=False, allow_none=True)


class LoginSchema(Schema):
    """POST /api/v1/users/login. Either ``email`` or ``username`` identifies the account."""
    email = fields.Str(required=False, validate=validate.Length(min=1))
    username = fields.Str(required=False, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True)

    @validates_schema
    def require_identifier(self, data, **kwargs):
        if not data.get('email') and not data.get('username'):
            raise ValidationError("Either email or username is required.", field_name="email")


class LogoutSchema(Schema):
    refresh_token = fields.Str(required=False, allow_none=True)


class UserResponseSchema(Schema):
    """Public user representation. The password hash is never dumped."""
    user_id = fields.Str(dump_only=True)
    username = fields.Str()
    email = fields.Email()
    full_name = fields.Str()
    avatar_url = fields.Str(allow_none=True)
    created_at = fields.DateTime()
