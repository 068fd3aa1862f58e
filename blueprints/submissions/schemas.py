from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

class SubmissionIn(BaseModel):
    # фронт шлёт camelCase, принимаем и snake_case
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    assignment_id: Optional[str] = Field(None, alias="assignmentId", max_length=36)
    repo_link: Optional[str] = Field(None, alias="repoLink", max_length=2048)
