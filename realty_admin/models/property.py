from realty_admin.extensions import db
from datetime import datetime
import uuid

property_features = db.Table(
    'property_feature_links',
    db.Column('property_id', db.String(36), db.ForeignKey('properties.property_id', ondelete='CASCADE'), primary_key=True),
    db.Column('feature_id', db.String(36), db.ForeignKey('property_features.feature_id', ondelete='CASCADE'), primary_key=True),
)

property_amenities = db.Table(
    'property_amenity_links',
    db.Column('property_id', db.String(36), db.ForeignKey('properties.property_id', ondelete='CASCADE'), primary_key=True),
    db.Column('amenity_id', db.String(36), db.ForeignKey('property_amenities.amenity_id', ondelete='CASCADE'), primary_key=True),
)

PROPERTY_TYPES = ('apartment', 'house', 'villa', 'plot', 'commercial', 'office')
LISTING_TYPES = ('rent', 'sale', 'both')
PROPERTY_STATUSES = ('draft', 'published', 'inactive', 'sold', 'rented')
VERIFICATION_STATUSES = ('pending', 'approved', 'rejected')


class Property(db.Model):
    __tablename__ = 'properties'

    """
    Property Model - a listing for rent and/or sale.

    Uploaded images and documents are embedded as JSON lists:
        images:    [{"image_id", "url", "filename", "is_main"}]
        documents: [{"document_id", "url", "filename", "doc_type", "document_name"}]

    ``property_code`` is generated on insert when not supplied
    (see realty_admin/models/events.py).
    """

    property_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    property_code = db.Column(db.String(20), unique=True, nullable=False)
    owner_id = db.Column(db.String(36), db.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True)
    category_id = db.Column(db.String(36), db.ForeignKey('property_categories.category_id'), nullable=False)
    property_type = db.Column(db.String(20), nullable=False)
    listing_type = db.Column(db.String(10), nullable=False)

    # Pricing
    monthly_rent = db.Column(db.Float)
    sale_price = db.Column(db.Float)
    security_deposit = db.Column(db.Float)
    maintenance_charge = db.Column(db.Float)

    # Layout
    area = db.Column(db.Float, nullable=False)
    area_unit = db.Column(db.String(10), nullable=False, default='sqft')
    bedroom = db.Column(db.Integer, default=0)
    bathroom = db.Column(db.Integer, default=0)
    balcony = db.Column(db.Integer, default=0)
    bhk = db.Column(db.String(20))
    floor_no = db.Column(db.Integer)
    total_floors = db.Column(db.Integer)
    furnish_type = db.Column(db.String(20), default='unfurnished')
    available_from = db.Column(db.Date)
    available_for = db.Column(db.String(20), default='any')

    # Location
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=False)
    locality = db.Column(db.String(150), nullable=False)
    landmark = db.Column(db.String(150))
    zipcode = db.Column(db.String(6), nullable=False)
    full_address = db.Column(db.String(500), nullable=False)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)

    images = db.Column(db.JSON, nullable=False, default=list)
    documents = db.Column(db.JSON, nullable=False, default=list)

    # Lifecycle
    status = db.Column(db.String(20), nullable=False, default='draft')
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_status = db.Column(db.String(20), nullable=False, default='pending')
    rejection_reason = db.Column(db.Text)
    views = db.Column(db.Integer, nullable=False, default=0)
    inquiries = db.Column(db.Integer, nullable=False, default=0)
    verified_by = db.Column(db.String(36), db.ForeignKey('admins.admin_id', ondelete='SET NULL'), nullable=True)
    verified_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship('User', foreign_keys=[owner_id], lazy='select')
    category = db.relationship('PropertyCategory', lazy='select')
    verifier = db.relationship('Admin', foreign_keys=[verified_by], lazy='select')
    features = db.relationship('PropertyFeature', secondary=property_features, lazy='select')
    amenities = db.relationship('PropertyAmenity', secondary=property_amenities, lazy='select')

    @property
    def main_image(self):
        for image in self.images or []:
            if image.get('is_main'):
                return image
        return (self.images or [None])[0]

    def to_summary(self):
        main_image = self.main_image
        return {
            "id": self.property_id,
            "title": self.title,
            "property_code": self.property_code,
            "property_type": self.property_type,
            "listing_type": self.listing_type,
            "monthly_rent": self.monthly_rent,
            "sale_price": self.sale_price,
            "city": self.city,
            "locality": self.locality,
            "status": self.status,
            "main_image": main_image.get('url') if main_image else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self):
        return {
            "id": self.property_id,
            "title": self.title,
            "description": self.description,
            "property_code": self.property_code,
            "owner_id": self.owner_id,
            "owner": self.owner.to_summary() if self.owner else None,
            "category_id": self.category_id,
            "category": {"id": self.category.category_id, "name": self.category.name} if self.category else None,
            "property_type": self.property_type,
            "listing_type": self.listing_type,
            "monthly_rent": self.monthly_rent,
            "sale_price": self.sale_price,
            "security_deposit": self.security_deposit,
            "maintenance_charge": self.maintenance_charge,
            "area": self.area,
            "area_unit": self.area_unit,
            "bedroom": self.bedroom,
            "bathroom": self.bathroom,
            "balcony": self.balcony,
            "bhk": self.bhk,
            "floor_no": self.floor_no,
            "total_floors": self.total_floors,
            "furnish_type": self.furnish_type,
            "available_from": self.available_from.isoformat() if self.available_from else None,
            "available_for": self.available_for,
            "city": self.city,
            "state": self.state,
            "locality": self.locality,
            "landmark": self.landmark,
            "zipcode": self.zipcode,
            "full_address": self.full_address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "features": [{"id": f.feature_id, "name": f.name} for f in self.features],
            "amenities": [{"id": a.amenity_id, "name": a.name} for a in self.amenities],
            "images": list(self.images or []),
            "documents": list(self.documents or []),
            "status": self.status,
            "is_featured": self.is_featured,
            "is_verified": self.is_verified,
            "verification_status": self.verification_status,
            "rejection_reason": self.rejection_reason,
            "views": self.views,
            "inquiries": self.inquiries,
            "verified_by": {"id": self.verifier.admin_id, "name": self.verifier.name} if self.verifier else None,
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
