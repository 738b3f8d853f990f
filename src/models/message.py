"""
Message-related Pydantic models
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class MessageDocument(BaseModel):
    """A stored message as returned by the API"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    body: str
    author: Optional[str] = Field(None, description="Identifier of the authoring user (not checked for existence)")


class MessageCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", min_length=1, description="Client supplied identifier; generated when omitted")
    title: str
    body: str
    author: str

    def to_document(self) -> dict:
        document = {"title": self.title, "body": self.body, "author": self.author}
        if self.id is not None:
            document["_id"] = self.id
        return document


class MessageUpdateRequest(BaseModel):
    """Partial update - only the fields that are provided are changed"""
    title: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None

    def to_updates(self) -> dict:
        return self.model_dump(exclude_none=True)


class MessageListResponse(BaseModel):
    messages: List[MessageDocument]


class MessageUpdateResponse(BaseModel):
    message: MessageDocument


class MessageDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Successfully deleted."
    id: str = Field(..., alias="_id")
