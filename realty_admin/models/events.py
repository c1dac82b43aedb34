from sqlalchemy import event

from realty_admin.models.role import Role
from realty_admin.models.taxonomy import PropertyCategory, PropertyFeature, PropertyAmenity
from realty_admin.models.property import Property
from realty_admin.models.payment import Payment
from realty_admin.utils import make_slug, generate_property_code, generate_payment_id


@event.listens_for(Role, "before_insert")
@event.listens_for(PropertyCategory, "before_insert")
@event.listens_for(PropertyFeature, "before_insert")
@event.listens_for(PropertyAmenity, "before_insert")
def generate_slug(mapper, connection, target):
    if not target.slug:
        target.slug = make_slug(target.name)


@event.listens_for(Role, "before_update")
@event.listens_for(PropertyCategory, "before_update")
@event.listens_for(PropertyFeature, "before_update")
@event.listens_for(PropertyAmenity, "before_update")
def refresh_slug(mapper, connection, target):
    target.slug = make_slug(target.name)


@event.listens_for(Property, "before_insert")
def generate_code(mapper, connection, target):
    if not target.property_code:
        target.property_code = generate_property_code()


@event.listens_for(Payment, "before_insert")
def generate_payment_identifier(mapper, connection, target):
    if not target.payment_id:
        target.payment_id = generate_payment_id()
