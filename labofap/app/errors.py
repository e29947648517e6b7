from __future__ import annotations

from fastapi import HTTPException, status

from labofap.app.services.header_util import create_failure_alert


class BadRequestAlertException(HTTPException):
    """
    400 carrying an alert payload: the detail names the entity and an error
    key the UI can translate, and the failure headers repeat both.
    """

    def __init__(self, message: str, entity_name: str, error_key: str) -> None:
        self.entity_name = entity_name
        self.error_key = error_key
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "title": message,
                "entityName": entity_name,
                "errorKey": error_key,
                "message": f"error.{error_key}",
                "params": entity_name,
            },
            headers=create_failure_alert(entity_name, error_key),
        )


class AuthorityAlreadyExistsError(BadRequestAlertException):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Authority name already used", "Authority", "authorityexists")
