# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by stores, services and routes.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Anything that is not a CmsError is an internal failure.
"""

from __future__ import annotations


class CmsError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(CmsError):
    status_code = 400
    public_message = "Invalid request"


class PathTraversalError(ValidationError):
    public_message = "Invalid id"


class AuthError(CmsError):
    status_code = 401
    public_message = "Unauthorized"


class ForbiddenError(CmsError):
    status_code = 403
    public_message = "Forbidden"


class NotFoundError(CmsError):
    status_code = 404
    public_message = "Not found"


class ConflictError(CmsError):
    status_code = 409
    public_message = "Already exists"


class StorageError(CmsError):
    """Backing file missing or unreadable. Detail stays server side."""

    status_code = 500


def client_message(exc: CmsError) -> str:
    if isinstance(exc, StorageError):
        return exc.public_message
    return exc.message
