from typing import Iterable, Optional

from marshmallow import Schema, fields, pre_load, validates

from oauth_core.utils import scopes as scope_utils


class ScopedSchema(Schema):
    """
    Base schema for records carrying a `scopes` string.

    Empty scopes fall back to the default scopes; the result must be within
    the application's scopes when it declares any, else within the server's
    default + optional scopes.
    """

    scopes = fields.String(allow_none=False)

    def __init__(
        self,
        *args,
        default_scopes: Iterable[str] = (),
        optional_scopes: Iterable[str] = (),
        application_scopes: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.default_scopes = list(default_scopes)
        self.optional_scopes = list(optional_scopes)
        self.application_scopes = application_scopes

    @pre_load
    def apply_default_scopes(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            data["scopes"] = scope_utils.resolve(data.get("scopes"), self.default_scopes)
        return data

    @validates("scopes")
    def validate_scopes(self, value, **kwargs):
        permitted = scope_utils.permitted_scopes(
            self.default_scopes, self.optional_scopes, self.application_scopes
        )
        # InvalidScopeError is a ValidationError; marshmallow files it under "scopes"
        scope_utils.check(value, permitted)
