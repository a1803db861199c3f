from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Optional


class BaseLeagueModel(BaseModel):
    """Common base for league records (members, rounds, settings).

    Assignments are re-validated, so a corrected stroke count or target
    score goes through the same field rules as a freshly loaded row.
    """
    model_config = ConfigDict(validate_assignment=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Apply one admin correction in place.

        Returns None when the value was accepted, otherwise the first
        validation message; the record keeps its old value in that case.
        """
        try:
            setattr(self, field_name, value)
        except ValidationError as e:
            return e.errors()[0]['msg']
        return None
