from marshmallow import fields, validate

from realty_admin.schemas.base import BaseSchema

PHONE_PATTERN = r'^[0-9]{10}$'


class LoginSchema(BaseSchema):
    email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Please provide a valid email"
    })
    password = fields.Str(required=True, validate=validate.Length(min=1), error_messages={
        "required": "Password is required"
    })


class ForgotPasswordSchema(BaseSchema):
    email = fields.Email(required=True, error_messages={"required": "Email is required"})


class ResetPasswordSchema(BaseSchema):
    email = fields.Email(required=True, error_messages={"required": "Email is required"})
    token = fields.Str(required=True, error_messages={"required": "Reset token is required"})
    password = fields.Str(required=True, validate=validate.Length(
        min=6, error="Password must be at least 6 characters long"))


class UpdateProfileSchema(BaseSchema):
    name = fields.Str(validate=validate.Length(min=1, max=50, error="Name must be between 1 and 50 characters"))
    phone = fields.Str(validate=validate.Regexp(PHONE_PATTERN, error="Please provide a valid 10-digit phone number"))
    address = fields.Str(allow_none=True)


class ChangePasswordSchema(BaseSchema):
    current_password = fields.Str(required=True)
    new_password = fields.Str(required=True, validate=validate.Length(
        min=6, error="Password must be at least 6 characters long"))
