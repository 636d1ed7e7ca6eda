from __future__ import annotations


class SurveyError(Exception):
    kind = "survey"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind}


class ValidationError(SurveyError):
    kind = "validation"


class DuplicateRotationError(SurveyError):
    kind = "duplicate_rotation"


class DuplicateFunctionError(SurveyError):
    kind = "duplicate_function"


class PersistenceError(SurveyError):
    kind = "persistence"


class NotFoundError(SurveyError):
    kind = "not_found"
