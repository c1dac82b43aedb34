from flask import Blueprint, request, jsonify

from realty_admin.auth import has_permission
from realty_admin.errors import Conflict
from realty_admin.extensions import db
from realty_admin.models.taxonomy import PropertyCategory, PropertyFeature, PropertyAmenity
from realty_admin.schemas.property_schema import TaxonomySchema
from realty_admin.utils import make_slug

bp = Blueprint('taxonomy', __name__)

taxonomy_schema = TaxonomySchema()


def _create(model, label, allowed_fields):
    data = taxonomy_schema.load(request.get_json(silent=True) or {})
    slug = make_slug(data['name'])

    if model.query.filter((model.name == data['name']) | (model.slug == slug)).first():
        raise Conflict(f'{label} with this name already exists')

    item = model(slug=slug, **{k: v for k, v in data.items() if k in allowed_fields})
    db.session.add(item)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": f"{label} created successfully",
        "data": item.to_dict()
    }), 201


@bp.route('/property-categories', methods=['GET'])
def list_categories():
    """Active categories for listing forms, in display order."""
    categories = (
        PropertyCategory.query
        .filter_by(is_active=True)
        .order_by(PropertyCategory.sort_order.asc(), PropertyCategory.name.asc())
        .all()
    )
    return jsonify({
        "success": True,
        "data": [{"id": c.category_id, "name": c.name, "slug": c.slug} for c in categories]
    }), 200


@bp.route('/property-categories', methods=['POST'])
@has_permission('properties', 'create')
def create_category():
    return _create(PropertyCategory, 'Category', {'name', 'description', 'icon', 'is_active', 'sort_order'})


@bp.route('/property-features', methods=['GET'])
def list_features():
    features = PropertyFeature.query.filter_by(is_active=True).order_by(PropertyFeature.name.asc()).all()
    return jsonify({"success": True, "data": [f.to_dict() for f in features]}), 200


@bp.route('/property-features', methods=['POST'])
@has_permission('properties', 'create')
def create_feature():
    return _create(PropertyFeature, 'Feature', {'name', 'description', 'icon', 'is_active'})


@bp.route('/property-amenities', methods=['GET'])
def list_amenities():
    amenities = PropertyAmenity.query.filter_by(is_active=True).order_by(PropertyAmenity.name.asc()).all()
    return jsonify({"success": True, "data": [a.to_dict() for a in amenities]}), 200


@bp.route('/property-amenities', methods=['POST'])
@has_permission('properties', 'create')
def create_amenity():
    return _create(PropertyAmenity, 'Amenity', {'name', 'description', 'icon', 'is_active', 'category'})
