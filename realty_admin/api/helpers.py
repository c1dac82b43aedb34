from flask import request

from realty_admin.errors import NotFound
from realty_admin.extensions import db


def get_payload():
    """JSON body, or form fields for multipart requests."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    if request.form:
        return request.form.to_dict()
    return {}


def get_or_404(model, object_id, message='Resource not found'):
    instance = db.session.get(model, object_id) if object_id else None
    if instance is None:
        raise NotFound(message)
    return instance
