import json

from marshmallow import Schema, EXCLUDE, fields, pre_load


class BaseSchema(Schema):
    """Request schema base: unknown keys are dropped, emails lower-cased."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get('email'), str):
            data['email'] = data['email'].strip().lower()
        return data


class IdList(fields.List):
    """
    List of string ids that also accepts a JSON array or comma separated
    string, which is what multipart forms send.
    """

    def __init__(self, **kwargs):
        super().__init__(fields.Str(), **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            text = value.strip()
            if text.startswith('['):
                try:
                    value = json.loads(text)
                except json.JSONDecodeError:
                    raise self.make_error('invalid')
            else:
                value = [part.strip() for part in text.split(',') if part.strip()]
        return super()._deserialize(value, attr, data, **kwargs)
