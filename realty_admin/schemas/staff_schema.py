from marshmallow import fields, validate

from realty_admin.models.task import TASK_TYPES, TASK_PRIORITIES, TASK_STATUSES
from realty_admin.schemas.base import BaseSchema

STAFF_STATUSES = ('active', 'inactive', 'suspended')


class StaffSchema(BaseSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True, error_messages={"invalid": "Please provide a valid email"})
    phone = fields.Str(required=True, validate=validate.Length(min=1, max=20))
    role_id = fields.Str(required=True, error_messages={"required": "Role is required"})
    status = fields.Str(validate=validate.OneOf(STAFF_STATUSES))
    hire_date = fields.Date(allow_none=True)
    salary = fields.Float(allow_none=True, validate=validate.Range(min=0, error="Salary cannot be negative"))
    address = fields.Str(allow_none=True)


class StaffStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(STAFF_STATUSES))


class AssignRoleSchema(BaseSchema):
    role_id = fields.Str(required=True)


class TaskSchema(BaseSchema):
    staff_id = fields.Str(required=True)
    property_id = fields.Str(allow_none=True)
    task_type = fields.Str(required=True, validate=validate.OneOf(TASK_TYPES))
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(allow_none=True)
    priority = fields.Str(validate=validate.OneOf(TASK_PRIORITIES))
    due_date = fields.DateTime(required=True)
    notes = fields.Str(allow_none=True)


class TaskStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(TASK_STATUSES))
    notes = fields.Str(allow_none=True)


class PerformanceLogSchema(BaseSchema):
    staff_id = fields.Str(required=True)
    task_id = fields.Str(allow_none=True)
    score = fields.Int(required=True, validate=validate.Range(
        min=0, max=100, error="Score must be between 0 and 100"))
    performance_date = fields.DateTime(allow_none=True)
    remarks = fields.Str(allow_none=True)
