class ShareItError(Exception):
    """Base class for business errors surfaced to API clients."""

    status_code = 500


class NotFoundError(ShareItError):
    """Entity is missing, or the caller may not see it."""

    status_code = 404


class ValidationError(ShareItError):
    """Input breaks a business rule."""

    status_code = 400


class ConflictError(ShareItError):
    """Unique data (e.g. e-mail) is already taken."""

    status_code = 409
