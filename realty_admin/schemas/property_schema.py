from marshmallow import fields, validate

from realty_admin.models.property import PROPERTY_TYPES, LISTING_TYPES, PROPERTY_STATUSES
from realty_admin.schemas.base import BaseSchema, IdList

_non_negative = validate.Range(min=0, error="Must be a positive number")


class PropertySchema(BaseSchema):
    """Property create/update payload. Load with partial=True for updates."""
    title = fields.Str(required=True, validate=validate.Length(
        min=1, max=200, error="Title must be between 1 and 200 characters"))
    description = fields.Str(required=True, validate=validate.Length(
        min=1, max=2000, error="Description must be between 1 and 2000 characters"))
    property_code = fields.Str(validate=validate.Length(max=20))
    owner_id = fields.Str(allow_none=True)
    category_id = fields.Str(required=True, error_messages={"required": "Category is required"})
    property_type = fields.Str(required=True, validate=validate.OneOf(PROPERTY_TYPES))
    listing_type = fields.Str(required=True, validate=validate.OneOf(LISTING_TYPES))

    monthly_rent = fields.Float(allow_none=True, validate=_non_negative)
    sale_price = fields.Float(allow_none=True, validate=_non_negative)
    security_deposit = fields.Float(allow_none=True, validate=_non_negative)
    maintenance_charge = fields.Float(allow_none=True, validate=_non_negative)

    area = fields.Float(required=True, validate=validate.Range(min=1, error="Area must be at least 1"))
    area_unit = fields.Str(validate=validate.OneOf(['sqft', 'sqm', 'acres']))
    bedroom = fields.Int(validate=_non_negative)
    bathroom = fields.Int(validate=_non_negative)
    balcony = fields.Int(validate=_non_negative)
    bhk = fields.Str(allow_none=True)
    floor_no = fields.Int(allow_none=True)
    total_floors = fields.Int(allow_none=True, validate=_non_negative)
    furnish_type = fields.Str(validate=validate.OneOf(['furnished', 'semi-furnished', 'unfurnished']))
    available_from = fields.Date(allow_none=True)
    available_for = fields.Str(validate=validate.OneOf(['family', 'bachelor', 'company', 'any']))

    city = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    state = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    locality = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    landmark = fields.Str(allow_none=True)
    zipcode = fields.Str(required=True, validate=validate.Regexp(
        r'^[0-9]{6}$', error="Please provide a valid 6-digit zipcode"))
    full_address = fields.Str(required=True, validate=validate.Length(min=1, max=500))
    latitude = fields.Float(allow_none=True, validate=validate.Range(min=-90, max=90))
    longitude = fields.Float(allow_none=True, validate=validate.Range(min=-180, max=180))

    features = IdList()
    amenities = IdList()

    status = fields.Str(validate=validate.OneOf(PROPERTY_STATUSES))
    is_featured = fields.Bool()


class PropertyStatusSchema(BaseSchema):
    status = fields.Str(required=True, validate=validate.OneOf(PROPERTY_STATUSES))


class RejectPropertySchema(BaseSchema):
    reason = fields.Str(required=True, validate=validate.Length(min=1, error="Rejection reason is required"))


class DocumentSchema(BaseSchema):
    doc_type = fields.Str(load_default='other', validate=validate.OneOf(
        ['ownership', 'tax', 'noc', 'agreement', 'other']))
    document_name = fields.Str(allow_none=True)


class TaxonomySchema(BaseSchema):
    """Payload shared by categories, features and amenities."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(allow_none=True, validate=validate.Length(max=255))
    icon = fields.Str(allow_none=True)
    is_active = fields.Bool()
    sort_order = fields.Int()
    category = fields.Str(allow_none=True)
