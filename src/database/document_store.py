"""
Document store: collections of JSON documents kept in PostgreSQL

Each collection is a table of (_id, doc JSONB) rows. Documents are handed
around as plain dicts carrying their identifier under "_id".
"""

import logging
from typing import Dict, Any, List, Optional, Tuple

import asyncpg

from database.connection import get_db_pool
from utils.identifiers import DocumentId, coerce_document_id

logger = logging.getLogger(__name__)

ID_FIELD = "_id"

# Collection name -> table name
COLLECTIONS = {
    "users": "users",
    "messages": "messages",
}

CREATE_COLLECTION_SQL = """
    CREATE TABLE IF NOT EXISTS {table} (
        seq BIGSERIAL,
        _id TEXT PRIMARY KEY,
        doc JSONB NOT NULL DEFAULT '{{}}'::jsonb,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""


def get_table_name(collection: str) -> str:
    """Get table name for a registered collection"""
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}")


async def ensure_collections(pool) -> None:
    """Create the backing table for every registered collection"""
    async with pool.acquire() as conn:
        for collection, table in COLLECTIONS.items():
            await conn.execute(CREATE_COLLECTION_SQL.format(table=table))
            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS {table}_doc_idx ON {table} USING GIN (doc)"
            )
            logger.info(f"Collection ready: {collection}")


def _as_text(value: Any) -> str:
    """Render a value the way PostgreSQL's ->> operator renders JSON scalars"""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_where_clause(filters: Optional[Dict[str, Any]], param_counter: int = 1) -> Tuple[str, List[Any], int]:
    """Build a WHERE clause from field-match filters

    ``{field: value}`` matches by equality, ``{field: [v1, v2]}`` matches any
    listed value. Field names are passed as parameters, never interpolated.

    Returns:
        (sql, params, next_param_counter); sql is empty when there are no filters
    """
    if not filters:
        return "", [], param_counter

    parts = []
    params = []

    for field, value in filters.items():
        if not field:
            raise ValueError("Filter field name cannot be empty")

        if field == ID_FIELD:
            if isinstance(value, (list, tuple, set)):
                parts.append(f"_id = ANY(${param_counter}::text[])")
                params.append([str(v) for v in value])
            else:
                parts.append(f"_id = ${param_counter}")
                params.append(str(value))
            param_counter += 1
        elif isinstance(value, (list, tuple, set)):
            parts.append(f"doc ->> ${param_counter} = ANY(${param_counter + 1}::text[])")
            params.extend([field, [_as_text(v) for v in value]])
            param_counter += 2
        else:
            # Containment lets PostgreSQL use the GIN index on doc
            parts.append(f"doc @> ${param_counter}::jsonb")
            params.append({field: value})
            param_counter += 1

    return "WHERE " + " AND ".join(parts), params, param_counter


def _row_to_document(row) -> Dict[str, Any]:
    document = {ID_FIELD: row["_id"]}
    document.update(row["doc"] or {})
    return document


def _split_document(document: Dict[str, Any]) -> Tuple[DocumentId, Dict[str, Any]]:
    body = {key: value for key, value in document.items() if key != ID_FIELD}
    return coerce_document_id(document.get(ID_FIELD)), body


class DocumentStore:
    """Collection operations on top of the shared asyncpg pool"""

    def __init__(self, pool=None):
        self._pool = pool

    def _get_pool(self):
        pool = self._pool or get_db_pool()
        if not pool:
            raise RuntimeError("Database pool not initialized")
        return pool

    async def ping(self) -> bool:
        async with self._get_pool().acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1

    async def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one document, generating its _id when absent"""
        table = get_table_name(collection)
        document_id, body = _split_document(document)
        query = f"INSERT INTO {table} (_id, doc) VALUES ($1, $2::jsonb) RETURNING _id, doc"

        logger.info(f"Executing INSERT: {query}")
        logger.info(f"Parameters: [{document_id}, {list(body.keys())}]")

        async with self._get_pool().acquire() as conn:
            async with conn.transaction():
                try:
                    row = await conn.fetchrow(query, str(document_id), body)
                except asyncpg.UniqueViolationError as e:
                    logger.warning(f"Unique constraint violation: {e}")
                    raise RuntimeError(f"CONFLICT: Document with _id {document_id} already exists")
                except asyncpg.PostgresError as e:
                    logger.error(f"Database error during INSERT: {e}")
                    raise RuntimeError(f"Database INSERT failed: {str(e)}")

        if not row:
            raise RuntimeError("Insert operation failed - no data returned")

        return _row_to_document(row)

    async def find(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Find documents matching all filters, in insertion order"""
        table = get_table_name(collection)
        where_sql, params, param_counter = build_where_clause(filters)

        query = f"SELECT _id, doc FROM {table}"
        if where_sql:
            query += f" {where_sql}"
        query += " ORDER BY seq"
        if limit is not None:
            query += f" LIMIT ${param_counter}"
            params.append(limit)

        logger.info(f"Executing READ query: {query}")
        logger.info(f"Parameters: {params}")

        async with self._get_pool().acquire() as conn:
            try:
                rows = await conn.fetch(query, *params)
            except asyncpg.PostgresError as e:
                logger.error(f"Database error: {e}")
                raise RuntimeError(f"Database query failed: {str(e)}")

        return [_row_to_document(row) for row in rows]

    async def find_one(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        documents = await self.find(collection, filters, limit=1)
        return documents[0] if documents else None

    async def find_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.find_one(collection, {ID_FIELD: document_id})

    async def update_one(self, collection: str, document_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge ``fields`` into one document; returns the post-image or None if absent"""
        table = get_table_name(collection)
        updates = {key: value for key, value in fields.items() if key != ID_FIELD}
        if not updates:
            return await self.find_by_id(collection, document_id)

        query = f"""
            UPDATE {table} SET doc = doc || $2::jsonb, updated_at = NOW()
            WHERE _id = $1
            RETURNING _id, doc
        """

        logger.info(f"Executing UPDATE on {table}: _id={document_id} fields={list(updates.keys())}")

        async with self._get_pool().acquire() as conn:
            async with conn.transaction():
                try:
                    row = await conn.fetchrow(query, str(document_id), updates)
                except asyncpg.PostgresError as e:
                    logger.error(f"Database error during UPDATE: {e}")
                    raise RuntimeError(f"Database UPDATE failed: {str(e)}")

        return _row_to_document(row) if row else None

    async def delete_one(self, collection: str, document_id: str) -> bool:
        return await self.delete_many(collection, {ID_FIELD: document_id}) > 0

    async def delete_many(self, collection: str, filters: Dict[str, Any]) -> int:
        """Delete every document matching the filters; returns the number removed"""
        table = get_table_name(collection)
        where_sql, params, _ = build_where_clause(filters)
        if not where_sql:
            raise ValueError("delete_many requires at least one filter")

        query = f"DELETE FROM {table} {where_sql}"

        logger.info(f"Executing DELETE: {query}")
        logger.info(f"Parameters: {params}")

        async with self._get_pool().acquire() as conn:
            async with conn.transaction():
                try:
                    result = await conn.execute(query, *params)
                except asyncpg.PostgresError as e:
                    logger.error(f"Database error during DELETE: {e}")
                    raise RuntimeError(f"Database DELETE failed: {str(e)}")

        # asyncpg returns "DELETE N" where N is the number of rows
        return int(result.split()[-1]) if result else 0


# Global store instance
_document_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """Get the global document store instance"""
    global _document_store
    if _document_store is None:
        _document_store = DocumentStore()
    return _document_store


def set_document_store(store: Optional[DocumentStore]) -> None:
    """Replace the global document store (None restores the default on next access)"""
    global _document_store
    _document_store = store
