from marshmallow import fields, validate

from realty_admin.schemas.auth_schema import PHONE_PATTERN
from realty_admin.schemas.base import BaseSchema, IdList

USER_STATUSES = ('active', 'inactive', 'pending')
USER_TYPES = ('tenant', 'landlord', 'both')


class UserSchema(BaseSchema):
    """
    End-user create/update payload.

    Validation rules:
    - name: 1-50 characters
    - phone: exactly 10 digits
    - password: at least 6 characters (create only)
    """
    name = fields.Str(required=True, validate=validate.Length(
        min=1, max=50, error="Name must be between 1 and 50 characters"))
    email = fields.Email(required=True, error_messages={"invalid": "Please provide a valid email"})
    phone = fields.Str(required=True, validate=validate.Regexp(
        PHONE_PATTERN, error="Please provide a valid 10-digit phone number"))
    password = fields.Str(required=True, validate=validate.Length(
        min=6, error="Password must be at least 6 characters long"))
    status = fields.Str(validate=validate.OneOf(USER_STATUSES))
    user_type = fields.Str(validate=validate.OneOf(USER_TYPES))
    address = fields.Str(allow_none=True)
    dob = fields.Date(allow_none=True)
    gender = fields.Str(allow_none=True, validate=validate.OneOf(['male', 'female', 'other']))
    is_verified = fields.Bool()
    is_blocked = fields.Bool()


class UserStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(USER_STATUSES))


class UserBlockSchema(BaseSchema):
    is_blocked = fields.Bool(required=True)


class BulkDeleteSchema(BaseSchema):
    user_ids = IdList(required=True, validate=validate.Length(min=1, error="Provide at least one user id"))
