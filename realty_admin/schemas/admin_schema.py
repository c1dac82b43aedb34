from marshmallow import fields, validate

from realty_admin.models.permission import PERMISSION_MODULES, PERMISSION_ACTIONS
from realty_admin.schemas.base import BaseSchema, IdList


class AdminSchema(BaseSchema):
    """Create/update payload for admin accounts. Load with partial=True for updates."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    email = fields.Email(required=True, error_messages={"invalid": "Please provide a valid email"})
    password = fields.Str(required=True, validate=validate.Length(
        min=6, error="Password must be at least 6 characters long"))
    phone = fields.Str(allow_none=True)
    status = fields.Str(validate=validate.OneOf(['active', 'inactive']))
    is_super_admin = fields.Bool()
    role_ids = IdList()
    permission_ids = IdList()


class RoleSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(allow_none=True, validate=validate.Length(max=255))
    is_active = fields.Bool()
    permission_ids = IdList()


class PermissionSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    module = fields.Str(required=True, validate=validate.OneOf(PERMISSION_MODULES))
    action = fields.Str(required=True, validate=validate.OneOf(PERMISSION_ACTIONS))
    description = fields.Str(allow_none=True, validate=validate.Length(max=255))
