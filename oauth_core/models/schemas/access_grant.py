from marshmallow import fields, validate

from oauth_core.models.schemas.common import ScopedSchema


class AccessGrantCreateSchema(ScopedSchema):
    resource_owner_id = fields.String(required=True)
    application_id = fields.String(required=True)
    expires_in = fields.Integer(required=True, strict=True)
    redirect_uri = fields.String(required=True, validate=validate.Length(min=1))
