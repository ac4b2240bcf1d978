from marshmallow import fields

from oauth_core.models.schemas.common import ScopedSchema


class AccessTokenCreateSchema(ScopedSchema):
    resource_owner_id = fields.String(allow_none=True, load_default=None)
    application_id = fields.String(allow_none=True, load_default=None)
    expires_in = fields.Integer(allow_none=True, strict=True, load_default=None)
    previous_refresh_token = fields.String(allow_none=True, load_default=None)
