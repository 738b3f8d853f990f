"""
pytest configuration and fixtures for the messages API suite
Per-test store setup, sample data creation, and cleanup
"""

import os

import pytest
import pytest_asyncio

from app import create_app
from database.connection import init_database, close_database
from database.document_store import DocumentStore, set_document_store
from services.messages_service import MessagesService
from services.users_service import UsersService

from infrastructure import (
    InMemoryDocumentStore, MessagesApiClient,
    SAMPLE_OBJECT_ID, CLEANUP_TITLES, CLEANUP_USERNAMES
)

# Point at a disposable PostgreSQL database to run the suite against the real store
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest_asyncio.fixture
async def document_store():
    """Document store shared by the app and the test's own assertions"""
    if TEST_DATABASE_URL:
        await init_database(TEST_DATABASE_URL)
        store = DocumentStore()
    else:
        store = InMemoryDocumentStore()

    set_document_store(store)
    try:
        yield store
    finally:
        set_document_store(None)
        if TEST_DATABASE_URL:
            await close_database()


@pytest.fixture
def messages_service(document_store):
    return MessagesService(document_store)


@pytest.fixture
def users_service(document_store):
    return UsersService(document_store)


@pytest_asyncio.fixture
async def sample_data(messages_service, users_service):
    """Create the sample user and their message; remove everything the test touched afterwards"""
    user_result = await users_service.create_user(
        username='myuser',
        password='mypassword',
        user_id=SAMPLE_OBJECT_ID
    )
    message_result = await messages_service.create_message(
        title='my title',
        body='my body',
        author=SAMPLE_OBJECT_ID,
        message_id=SAMPLE_OBJECT_ID
    )
    assert user_result.success, f"Sample user setup failed: {user_result.error}"
    assert message_result.success, f"Sample message setup failed: {message_result.error}"

    yield {
        'user': user_result.data[0],
        'message': message_result.data[0]
    }

    messages_cleanup = await messages_service.delete_messages_by_title(CLEANUP_TITLES)
    users_cleanup = await users_service.delete_users_by_username(CLEANUP_USERNAMES)
    assert messages_cleanup.success, f"Message cleanup failed: {messages_cleanup.error}"
    assert users_cleanup.success, f"User cleanup failed: {users_cleanup.error}"


@pytest_asyncio.fixture
async def api_client(document_store):
    """In-process client for the app; the store comes from the document_store fixture"""
    app = create_app(use_lifespan=False)
    async with MessagesApiClient(app) as client:
        yield client
