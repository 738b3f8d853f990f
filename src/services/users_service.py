"""
Users service - message authors
"""

import logging
from typing import List, Optional
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class UsersService(BaseService):
    """Service for user document operations"""

    def __init__(self, store=None):
        super().__init__("users", store)

    async def create_user(self, username: str, password: str, user_id: Optional[str] = None) -> ServiceResult:
        user_data = {"username": username, "password": password}
        if user_id:
            user_data["_id"] = user_id

        logger.info(f"Creating new user: {username}")
        return await self.create(user_data)

    async def get_user_by_id(self, user_id: str) -> ServiceResult:
        return await self.get_by_id(user_id)

    async def delete_users_by_username(self, usernames: List[str]) -> ServiceResult:
        return await self.delete_where({"username": usernames})


# Global service instance
_users_service: Optional[UsersService] = None


def get_users_service() -> UsersService:
    """Get the global users service instance"""
    global _users_service
    if _users_service is None:
        _users_service = UsersService()
    return _users_service
