"""
Messages service - business logic for message documents
"""

import logging
from typing import Dict, Any, List, Optional
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class MessagesService(BaseService):
    """Service for message CRUD operations"""

    def __init__(self, store=None):
        super().__init__("messages", store)

    async def list_messages(self) -> ServiceResult:
        """Get every message in insertion order"""
        return await self.read()

    async def get_message_by_id(self, message_id: str) -> ServiceResult:
        return await self.get_by_id(message_id)

    async def get_messages_by_title(self, title: str) -> ServiceResult:
        return await self.get_by_field("title", title)

    async def create_message(
        self,
        title: str,
        body: str,
        author: str,
        message_id: Optional[str] = None
    ) -> ServiceResult:
        """
        Create a new message

        Args:
            title: Message title
            body: Message body
            author: Identifier of the authoring user; its existence is not checked
            message_id: Identifier to store the message under (optional)

        Returns:
            ServiceResult with created message data
        """
        message_data = {
            "title": title,
            "body": body,
            "author": author
        }

        if message_id:
            message_data["_id"] = message_id

        logger.info(f"Creating new message by author: {author}")
        return await self.create(message_data)

    async def update_message(self, message_id: str, updates: Dict[str, Any]) -> ServiceResult:
        logger.info(f"Updating message {message_id} fields: {list(updates.keys())}")
        return await self.update(message_id, updates)

    async def delete_message(self, message_id: str) -> ServiceResult:
        logger.info(f"Deleting message {message_id}")
        return await self.delete(message_id)

    async def delete_messages_by_title(self, titles: List[str]) -> ServiceResult:
        return await self.delete_where({"title": titles})


# Global service instance
_messages_service: Optional[MessagesService] = None


def get_messages_service() -> MessagesService:
    """Get the global messages service instance"""
    global _messages_service
    if _messages_service is None:
        _messages_service = MessagesService()
    return _messages_service
