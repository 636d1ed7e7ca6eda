from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class EvaluationCreate(BaseModel):
    mdpName: str = ""
    functionName: str = Field(..., min_length=1)
    manager: str = ""
    responses: dict[str, Any]
    emailResponse: bool = False
    respondentEmail: str | None = None

    @model_validator(mode="after")
    def validate_email_fields(self) -> "EvaluationCreate":
        if self.respondentEmail is not None:
            self.respondentEmail = self.respondentEmail.strip() or None
        if self.emailResponse and self.respondentEmail is None:
            raise ValueError("respondentEmail is required when emailResponse is set")
        if self.emailResponse and "@" not in self.respondentEmail:
            raise ValueError("respondentEmail must be an email address")
        return self
