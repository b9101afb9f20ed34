"""Staff account schemas."""

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)
