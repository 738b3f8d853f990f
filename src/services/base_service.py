"""
Base service layer for unified document store operations
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from database.document_store import DocumentStore, get_document_store, get_table_name

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


def _failure_from_exception(e: Exception) -> ServiceResult:
    """Classify a store exception into a failed ServiceResult"""
    error_msg = str(e)
    lowered = error_msg.lower()

    if isinstance(e, ValueError):
        return ServiceResult(success=False, error=error_msg, error_type="INVALID_QUERY")
    if lowered.startswith("conflict") or "unique constraint" in lowered:
        return ServiceResult(success=False, error="Record already exists", error_type="CONFLICT_ERROR")
    if "database" in lowered:
        return ServiceResult(success=False, error=f"Database operation failed: {e}", error_type="DATABASE_ERROR")
    return ServiceResult(success=False, error=error_msg, error_type="EXECUTION_ERROR")


class BaseService:
    """Base service that wraps one document store collection"""

    def __init__(self, collection: str, store: Optional[DocumentStore] = None):
        # Fail fast on unregistered collections
        get_table_name(collection)
        self.collection = collection
        self._store = store
        logger.info(f"BaseService initialized for collection: {collection}")

    @property
    def store(self) -> DocumentStore:
        return self._store or get_document_store()

    async def create(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a new document

        Args:
            data: Field values to insert, optionally including "_id"

        Returns:
            ServiceResult with created document
        """
        try:
            document = await self.store.insert(self.collection, data)
            return ServiceResult(success=True, data=[document], count=1)
        except Exception as e:
            logger.error(f"Create operation failed for {self.collection}: {e}", exc_info=True)
            return _failure_from_exception(e)

    async def read(self, filters: Optional[Dict[str, Any]] = None, limit: Optional[int] = None) -> ServiceResult:
        """
        Read documents matching field filters

        Args:
            filters: {field_name: value} equality, or {field_name: [values]} membership
            limit: Maximum number of documents to return (default: all)

        Returns:
            ServiceResult with matched documents
        """
        try:
            documents = await self.store.find(self.collection, filters, limit=limit)
            return ServiceResult(success=True, data=documents, count=len(documents))
        except Exception as e:
            logger.error(f"Read operation failed for {self.collection}: {e}")
            return _failure_from_exception(e)

    async def get_by_id(self, record_id: str) -> ServiceResult:
        """Get a single document by identifier; RESOURCE_NOT_FOUND when absent"""
        try:
            document = await self.store.find_by_id(self.collection, record_id)
        except Exception as e:
            logger.error(f"Get operation failed for {self.collection}: {e}")
            return _failure_from_exception(e)

        if document is None:
            return ServiceResult(
                success=False,
                error=f"Record not found with ID: {record_id}",
                error_type="RESOURCE_NOT_FOUND"
            )
        return ServiceResult(success=True, data=[document], count=1)

    async def get_by_field(self, field_name: str, value: Any, limit: Optional[int] = None) -> ServiceResult:
        return await self.read(filters={field_name: value}, limit=limit)

    async def update(self, record_id: str, data: Dict[str, Any]) -> ServiceResult:
        """
        Apply a partial update to one document

        Args:
            record_id: Identifier of the document to update
            data: Field values to merge into the document

        Returns:
            ServiceResult with the updated document
        """
        if not data:
            return ServiceResult(
                success=False,
                error="No fields provided for update",
                error_type="INVALID_QUERY"
            )

        try:
            document = await self.store.update_one(self.collection, record_id, data)
        except Exception as e:
            logger.error(f"Update operation failed for {self.collection}: {e}", exc_info=True)
            return _failure_from_exception(e)

        if document is None:
            return ServiceResult(
                success=False,
                error=f"Record not found with ID: {record_id}",
                error_type="RESOURCE_NOT_FOUND"
            )
        return ServiceResult(success=True, data=[document], count=1)

    async def delete(self, record_id: str) -> ServiceResult:
        """Delete one document by identifier; RESOURCE_NOT_FOUND when absent"""
        try:
            deleted = await self.store.delete_one(self.collection, record_id)
        except Exception as e:
            logger.error(f"Delete operation failed for {self.collection}: {e}")
            return _failure_from_exception(e)

        if not deleted:
            return ServiceResult(
                success=False,
                error=f"Record not found with ID: {record_id}",
                error_type="RESOURCE_NOT_FOUND"
            )
        return ServiceResult(success=True, data=[{"_id": record_id}], count=1)

    async def delete_where(self, filters: Dict[str, Any]) -> ServiceResult:
        """Delete every document matching the filters; count holds the number removed"""
        try:
            removed = await self.store.delete_many(self.collection, filters)
            return ServiceResult(success=True, data=[], count=removed)
        except Exception as e:
            logger.error(f"Bulk delete failed for {self.collection}: {e}")
            return _failure_from_exception(e)
