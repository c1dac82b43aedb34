import uuid
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, g
from sqlalchemy import func

from realty_admin.auth import ADMIN, USER, protect, optional_auth, admin_only, has_permission, current_principal
from realty_admin.api.helpers import get_payload, get_or_404
from realty_admin.errors import Forbidden, NotFound, ValidationFailed
from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.property import Property, property_amenities, PROPERTY_TYPES, LISTING_TYPES, PROPERTY_STATUSES
from realty_admin.models.taxonomy import PropertyCategory, PropertyFeature, PropertyAmenity
from realty_admin.models.user import User
from realty_admin.pagination import get_page_params, get_sort, paginate
from realty_admin.schemas.property_schema import (
    PropertySchema,
    PropertyStatusSchema,
    RejectPropertySchema,
    DocumentSchema,
)
from realty_admin.services.notifications import queue_template_email
from realty_admin.uploads import save_uploads, remove_files, remove_path, path_for_url, IMAGES, DOCUMENTS

bp = Blueprint('properties', __name__)

property_schema = PropertySchema()
property_status_schema = PropertyStatusSchema()
reject_schema = RejectPropertySchema()
document_schema = DocumentSchema()

PROPERTY_SORT_FIELDS = {
    'created_at', 'updated_at', 'title', 'monthly_rent', 'sale_price', 'area', 'views', 'city',
}
MAX_IMAGES_PER_REQUEST = 15


def _property_filters(args):
    return (
        FilterBuilder()
        .equals(Property.property_type, args.get('property_type'), allowed=PROPERTY_TYPES)
        .equals(Property.listing_type, args.get('listing_type'), allowed=LISTING_TYPES)
        .contains(Property.city, args.get('city'))
        .price_range((Property.monthly_rent, Property.sale_price), args.get('min_price'), args.get('max_price'))
        .equals(Property.bedroom, _as_int(args.get('bedroom')))
        .flag(Property.is_featured, args.get('is_featured'))
        .flag(Property.is_verified, args.get('is_verified'))
        .equals(Property.owner_id, args.get('owner_id'))
        .equals(Property.category_id, args.get('category_id'))
    )


def _as_int(value):
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


def _load_features(ids):
    return PropertyFeature.query.filter(PropertyFeature.feature_id.in_(ids)).all() if ids else []


def _load_amenities(ids):
    return PropertyAmenity.query.filter(PropertyAmenity.amenity_id.in_(ids)).all() if ids else []


def _image_records(saved, has_main):
    records = []
    for index, item in enumerate(saved):
        records.append({
            "image_id": str(uuid.uuid4()),
            "url": item['url'],
            "filename": item['filename'],
            "is_main": not has_main and index == 0,
        })
    return records


def _document_records(saved, doc_type='other', document_name=None):
    return [{
        "document_id": str(uuid.uuid4()),
        "url": item['url'],
        "filename": item['filename'],
        "doc_type": doc_type,
        "document_name": document_name or item['original_name'],
    } for item in saved]


def _ensure_can_modify(prop):
    """End users may only touch their own listings."""
    principal = g.principal
    if principal.kind == USER and prop.owner_id != principal.id:
        raise Forbidden('Not authorized to modify this property')


def _list_response(query, page, limit):
    properties, pagination = paginate(query, page, limit)
    return jsonify({
        "success": True,
        "data": [p.to_dict() for p in properties],
        "pagination": pagination
    }), 200


@bp.route('', methods=['GET'])
@optional_auth
def list_properties():
    """
    List properties.

    Query Parameters:
        - page, limit
        - status: defaults to 'published'; 'all' disables the status filter
        - search: title, description, city or locality
        - property_type, listing_type, city, bedroom, owner_id, category_id
        - min_price / max_price: matched against monthly rent or sale price
        - is_featured, is_verified: true | false
        - sort_by / sort_order
    """
    page, limit = get_page_params()
    filters = _property_filters(request.args).search(
        request.args.get('search'),
        Property.title, Property.description, Property.city, Property.locality
    )

    status = request.args.get('status', 'published')
    if status != 'all':
        filters.equals(Property.status, status, allowed=PROPERTY_STATUSES)

    query = filters.apply(Property.query).order_by(get_sort(Property, PROPERTY_SORT_FIELDS))
    return _list_response(query, page, limit)


@bp.route('/search', methods=['GET'])
def search_properties():
    """Public search over published, verified listings."""
    page, limit = get_page_params()
    filters = (
        _property_filters(request.args)
        .search(request.args.get('q'),
                Property.title, Property.description, Property.city, Property.locality, Property.full_address)
        .equals(Property.status, 'published')
        .add(Property.is_verified.is_(True))
    )

    amenity_ids = [a.strip() for a in (request.args.get('amenities') or '').split(',') if a.strip()]
    if amenity_ids:
        filters.add(Property.property_id.in_(
            db.session.query(property_amenities.c.property_id)
            .filter(property_amenities.c.amenity_id.in_(amenity_ids))
        ))

    query = filters.apply(Property.query).order_by(get_sort(Property, PROPERTY_SORT_FIELDS))
    return _list_response(query, page, limit)


@bp.route('/featured', methods=['GET'])
def featured_properties():
    limit = _as_int(request.args.get('limit')) or 6
    limit = max(1, min(limit, current_app.config.get('MAX_PAGE_SIZE', 100)))

    properties = (
        Property.query
        .filter_by(status='published', is_verified=True, is_featured=True)
        .order_by(Property.created_at.desc())
        .limit(limit)
        .all()
    )
    return jsonify({"success": True, "data": [p.to_dict() for p in properties]}), 200


@bp.route('/stats', methods=['GET'])
@admin_only
def property_stats():
    by_type = dict(
        db.session.query(Property.property_type, func.count(Property.property_id))
        .group_by(Property.property_type).all()
    )
    top_cities = (
        db.session.query(Property.city, func.count(Property.property_id).label('count'))
        .group_by(Property.city)
        .order_by(func.count(Property.property_id).desc())
        .limit(10)
        .all()
    )

    return jsonify({
        "success": True,
        "data": {
            "total": Property.query.count(),
            "published": Property.query.filter_by(status='published').count(),
            "draft": Property.query.filter_by(status='draft').count(),
            "verified": Property.query.filter_by(is_verified=True).count(),
            "pending_verification": Property.query.filter_by(verification_status='pending').count(),
            "featured": Property.query.filter_by(is_featured=True).count(),
            "by_type": by_type,
            "top_cities": [{"city": city, "count": count} for city, count in top_cities],
        }
    }), 200


@bp.route('/<property_id>', methods=['GET'])
@optional_auth
def get_property(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')

    if current_principal() is None:
        prop.views = (prop.views or 0) + 1
        db.session.commit()

    return jsonify({"success": True, "data": prop.to_dict()}), 200


@bp.route('', methods=['POST'])
@protect
def create_property():
    """
    Create a property from JSON or multipart form data.

    Multipart fields ``images`` (several) and ``documents`` (several) are
    stored on disk first; they are removed again if validation fails.
    An end user creating a listing becomes its owner unless owner_id is given.
    """
    saved_images = save_uploads(request.files.getlist('images')[:MAX_IMAGES_PER_REQUEST], IMAGES, 'images')
    try:
        saved_documents = save_uploads(request.files.getlist('documents'), DOCUMENTS, 'documents')
    except Exception:
        remove_files(saved_images)
        raise

    try:
        data = property_schema.load(get_payload())

        if not db.session.get(PropertyCategory, data['category_id']):
            raise ValidationFailed(errors=[
                {"field": "category_id", "message": "Invalid category", "value": data['category_id']}
            ])

        owner_id = data.pop('owner_id', None)
        if owner_id is None and g.principal.kind == USER:
            owner_id = g.principal.id
        if owner_id and not db.session.get(User, owner_id):
            raise ValidationFailed(errors=[{"field": "owner_id", "message": "Owner not found", "value": owner_id}])

        features = _load_features(data.pop('features', None))
        amenities = _load_amenities(data.pop('amenities', None))

        prop = Property(**data)
        prop.owner_id = owner_id
        prop.features = features
        prop.amenities = amenities
        prop.images = _image_records(saved_images, has_main=False)
        prop.documents = _document_records(saved_documents)

        db.session.add(prop)
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_files(saved_images + saved_documents)
        raise

    current_app.logger.info(f"Property {prop.property_id} ({prop.property_code}) created by {g.principal.kind} {g.principal.id}")

    return jsonify({
        "success": True,
        "message": "Property created successfully",
        "data": prop.to_dict()
    }), 201


@bp.route('/<property_id>', methods=['PUT'])
@protect
def update_property(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    _ensure_can_modify(prop)

    data = property_schema.load(get_payload(), partial=True)

    if 'category_id' in data and not db.session.get(PropertyCategory, data['category_id']):
        raise ValidationFailed(errors=[
            {"field": "category_id", "message": "Invalid category", "value": data['category_id']}
        ])
    if 'owner_id' in data and g.principal.kind == USER:
        data.pop('owner_id')
    if data.get('owner_id') and not db.session.get(User, data['owner_id']):
        raise ValidationFailed(errors=[{"field": "owner_id", "message": "Owner not found", "value": data['owner_id']}])

    if 'features' in data:
        prop.features = _load_features(data.pop('features'))
    if 'amenities' in data:
        prop.amenities = _load_amenities(data.pop('amenities'))

    for field, value in data.items():
        setattr(prop, field, value)

    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Property updated successfully",
        "data": prop.to_dict()
    }), 200


@bp.route('/<property_id>/status', methods=['PATCH'])
@has_permission('properties', 'update')
def update_property_status(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    data = property_status_schema.load(request.get_json(silent=True) or {})

    prop.status = data['status']
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"Property status updated to {prop.status}",
        "data": prop.to_dict()
    }), 200


@bp.route('/<property_id>', methods=['DELETE'])
@has_permission('properties', 'delete')
def delete_property(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')

    paths = [path_for_url(item.get('url')) for item in (prop.images or []) + (prop.documents or [])]

    db.session.delete(prop)
    db.session.commit()

    for path in paths:
        remove_path(path)

    current_app.logger.info(f"Property {property_id} deleted by admin {g.principal.id}")
    return jsonify({"success": True, "message": "Property deleted successfully"}), 200


@bp.route('/<property_id>/verify', methods=['POST'])
@admin_only
def verify_property(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')

    prop.is_verified = True
    prop.verification_status = 'approved'
    prop.rejection_reason = None
    prop.verified_by = g.principal.id
    prop.verified_at = datetime.utcnow()
    db.session.commit()

    if prop.owner:
        queue_template_email('property_approved', prop.owner.email, {
            "name": prop.owner.name,
            "property_title": prop.title,
        })

    return jsonify({
        "success": True,
        "message": "Property verified successfully",
        "data": prop.to_dict()
    }), 200


@bp.route('/<property_id>/reject', methods=['POST'])
@admin_only
def reject_property(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    data = reject_schema.load(request.get_json(silent=True) or {})

    prop.is_verified = False
    prop.verification_status = 'rejected'
    prop.rejection_reason = data['reason']
    prop.verified_by = g.principal.id
    prop.verified_at = datetime.utcnow()
    db.session.commit()

    if prop.owner:
        queue_template_email('property_rejected', prop.owner.email, {
            "name": prop.owner.name,
            "property_title": prop.title,
            "reason": data['reason'],
        })

    return jsonify({
        "success": True,
        "message": "Property rejected",
        "data": prop.to_dict()
    }), 200


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

@bp.route('/<property_id>/images', methods=['GET'])
def get_property_images(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    return jsonify({"success": True, "data": list(prop.images or [])}), 200


@bp.route('/<property_id>/images', methods=['POST'])
@protect
def upload_property_images(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    _ensure_can_modify(prop)

    files = request.files.getlist('images')
    if not any(f and f.filename for f in files):
        raise ValidationFailed('No images uploaded')

    saved = save_uploads(files[:MAX_IMAGES_PER_REQUEST], IMAGES, 'images')
    try:
        has_main = any(image.get('is_main') for image in prop.images or [])
        prop.images = list(prop.images or []) + _image_records(saved, has_main=has_main)
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_files(saved)
        raise

    return jsonify({
        "success": True,
        "message": f"{len(saved)} image(s) uploaded successfully",
        "data": list(prop.images)
    }), 201


@bp.route('/<property_id>/images/<image_id>', methods=['DELETE'])
@protect
def delete_property_image(property_id, image_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    _ensure_can_modify(prop)

    images = list(prop.images or [])
    target = next((image for image in images if image.get('image_id') == image_id), None)
    if target is None:
        raise NotFound('Image not found')

    remaining = [image for image in images if image.get('image_id') != image_id]
    if target.get('is_main') and remaining:
        remaining[0] = dict(remaining[0], is_main=True)
    prop.images = remaining
    db.session.commit()

    remove_path(path_for_url(target.get('url')))

    return jsonify({"success": True, "message": "Image deleted successfully", "data": remaining}), 200


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@bp.route('/<property_id>/documents', methods=['GET'])
@protect
def get_property_documents(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    if g.principal.kind != ADMIN and prop.owner_id != g.principal.id:
        raise Forbidden('Not authorized to view these documents')
    return jsonify({"success": True, "data": list(prop.documents or [])}), 200


@bp.route('/<property_id>/documents', methods=['POST'])
@protect
def upload_property_document(property_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    _ensure_can_modify(prop)

    document = request.files.get('document')
    if document is None or not document.filename:
        raise ValidationFailed('No document uploaded')

    saved = save_uploads([document], DOCUMENTS, 'document')
    try:
        data = document_schema.load(request.form.to_dict())
        prop.documents = list(prop.documents or []) + _document_records(
            saved, doc_type=data['doc_type'], document_name=data.get('document_name')
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_files(saved)
        raise

    return jsonify({
        "success": True,
        "message": "Document uploaded successfully",
        "data": list(prop.documents)
    }), 201


@bp.route('/<property_id>/documents/<document_id>', methods=['DELETE'])
@protect
def delete_property_document(property_id, document_id):
    prop = get_or_404(Property, property_id, 'Property not found')
    _ensure_can_modify(prop)

    documents = list(prop.documents or [])
    target = next((doc for doc in documents if doc.get('document_id') == document_id), None)
    if target is None:
        raise NotFound('Document not found')

    prop.documents = [doc for doc in documents if doc.get('document_id') != document_id]
    db.session.commit()

    remove_path(path_for_url(target.get('url')))

    return jsonify({"success": True, "message": "Document deleted successfully"}), 200


@bp.route('/owners/<owner_id>/properties', methods=['GET'])
@protect
def owner_properties(owner_id):
    if g.principal.kind == USER and g.principal.id != owner_id:
        raise Forbidden('Not authorized to view these properties')

    page, limit = get_page_params()
    query = (
        FilterBuilder()
        .equals(Property.owner_id, owner_id)
        .equals(Property.status, request.args.get('status'), allowed=PROPERTY_STATUSES)
        .apply(Property.query)
        .order_by(Property.created_at.desc())
    )
    return _list_response(query, page, limit)
