"""
Error kinds raised by the asset-tagging core.

Services raise these and never translate them to responses themselves;
``assettag.main`` maps ``status_code`` onto the HTTP reply.
"""


class AssetTagError(Exception):
    status_code = 500
    default_detail = "Server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(AssetTagError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AssetTagError):
    status_code = 409
    default_detail = "Conflict"


class ForbiddenError(AssetTagError):
    status_code = 403
    default_detail = "Forbidden"


class AuthError(AssetTagError):
    status_code = 401
    default_detail = "Invalid credentials"


class InvalidSlotError(AssetTagError):
    status_code = 400
    default_detail = "Invalid photo slot"


class ValidationError(AssetTagError):
    status_code = 400
    default_detail = "Invalid payload"
