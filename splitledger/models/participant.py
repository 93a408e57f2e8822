from pydantic import Field, model_validator

from splitledger.models.base import MongoModel


class Participant(MongoModel):
    """Someone sharing expenses. Deactivated, never deleted, once referenced."""

    name: str = Field(..., min_length=1, max_length=200)
    initial_name: str = ""
    is_active: bool = True

    @model_validator(mode="after")
    def _default_initial_name(self):
        if not self.initial_name:
            self.initial_name = self.name
        return self
