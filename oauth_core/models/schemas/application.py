from marshmallow import Schema, fields, pre_load, validate


class ApplicationCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    uid = fields.String(required=True, validate=validate.Length(min=1, max=255))
    secret = fields.String(required=True, validate=validate.Length(min=1, max=255))
    redirect_uri = fields.String(allow_none=True, load_default=None)
    scopes = fields.String(allow_none=True, load_default="")
    owner_id = fields.String(allow_none=True, load_default=None)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if isinstance(data.get("name"), str):
                data["name"] = data["name"].strip()
            if isinstance(data.get("scopes"), str):
                data["scopes"] = " ".join(data["scopes"].split())
        return data
