"""
User-related Pydantic models
"""

from pydantic import BaseModel, ConfigDict, Field


class UserDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    username: str
    password: str
