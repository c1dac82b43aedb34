from realty_admin.extensions import db
from datetime import datetime
import json
import uuid


class Setting(db.Model):
    __tablename__ = 'settings'

    setting_id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    key = db.Column(db.String(255), unique=True, nullable=False)
    value = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def get_json(cls, key, default=None):
        setting = cls.query.filter_by(key=key).first()
        if not setting or not setting.value:
            return default
        try:
            return json.loads(setting.value)
        except (json.JSONDecodeError, TypeError):
            return default

    @classmethod
    def set_json(cls, key, value):
        setting = cls.query.filter_by(key=key).first()
        if not setting:
            setting = cls(key=key)
            db.session.add(setting)
        setting.value = json.dumps(value)
        return setting
