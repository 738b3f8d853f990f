"""
Store failures, unhandled errors, and log redaction
"""

import pytest
import pytest_asyncio

from app import create_app
from database.document_store import set_document_store
from services.messages_service import MessagesService
from utils.error_handling import ErrorHandlingConfig

from infrastructure import FailingDocumentStore, MessagesApiClient, SAMPLE_OBJECT_ID, validate_error_response

BROKEN_MESSAGE_ID = "dddddddddddd"


@pytest_asyncio.fixture
async def failing_client():
    set_document_store(FailingDocumentStore())
    try:
        async with MessagesApiClient(create_app(use_lifespan=False)) as client:
            yield client
    finally:
        set_document_store(None)


class TestStoreFailures:
    """Store errors surface as 500 responses with the standard error body"""

    @pytest.mark.asyncio
    async def test_list_with_store_down(self, failing_client):
        response = await failing_client.list_messages()

        assert validate_error_response(response, 500) == []
        assert response['error'] == 'HTTP 500'

    @pytest.mark.asyncio
    async def test_create_with_store_down(self, failing_client):
        response = await failing_client.create_message({
            'title': 'new msg title',
            'body': 'new msg body',
            'author': SAMPLE_OBJECT_ID
        })

        assert validate_error_response(response, 500) == []

    @pytest.mark.asyncio
    async def test_health_reports_unavailable(self, failing_client):
        response = await failing_client.rest_request("GET", "/health")

        assert validate_error_response(response, 503) == []

    @pytest.mark.asyncio
    async def test_service_classifies_database_errors(self):
        service = MessagesService(FailingDocumentStore())

        result = await service.list_messages()

        assert result.success is False
        assert result.error_type == "DATABASE_ERROR"


class TestUnhandledErrors:
    """Errors no route handles still get the standard body and the trace header"""

    @pytest.mark.asyncio
    async def test_unreadable_stored_message(self, document_store, messages_service):
        # A stored message without a title cannot be serialized as a MessageDocument
        await document_store.insert("messages", {"_id": BROKEN_MESSAGE_ID, "body": "x", "author": SAMPLE_OBJECT_ID})
        try:
            app = create_app(use_lifespan=False)
            async with MessagesApiClient(app, raise_app_exceptions=False) as client:
                response = await client.get_message(BROKEN_MESSAGE_ID)
        finally:
            await messages_service.delete_message(BROKEN_MESSAGE_ID)

        assert validate_error_response(response, 500) == []
        assert response['error'] == 'Internal Server Error'
        assert response['message'] == 'An unexpected error occurred'
        assert response['_trace_id']
        assert response['_trace_id'] == response['trace_id']


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_with_store_up(self, api_client):
        response = await api_client.rest_request("GET", "/health")

        assert response['_status_code'] == 200
        assert response['status'] == 'healthy'
        assert response['database'] == 'connected'


class TestLogRedaction:

    def test_sensitive_fields_are_redacted(self):
        sanitized = ErrorHandlingConfig.sanitize_data({
            'username': 'myuser',
            'password': 'mypassword',
            'nested': [{'api_key': 'abc', 'title': 'my title'}]
        })

        assert sanitized['username'] == 'myuser'
        assert sanitized['password'] == '***REDACTED***'
        assert sanitized['nested'][0]['api_key'] == '***REDACTED***'
        assert sanitized['nested'][0]['title'] == 'my title'

    def test_long_strings_are_truncated(self):
        sanitized = ErrorHandlingConfig.sanitize_data('x' * (ErrorHandlingConfig.MAX_BODY_LOG_SIZE + 10))

        assert sanitized.endswith('...[TRUNCATED]')
        assert len(sanitized) == ErrorHandlingConfig.MAX_BODY_LOG_SIZE + len('...[TRUNCATED]')

    def test_author_is_not_mistaken_for_auth(self):
        sanitized = ErrorHandlingConfig.sanitize_data({
            'title': 'my title',
            'author': SAMPLE_OBJECT_ID,
            'password': 'mypassword'
        })

        assert sanitized['title'] == 'my title'
        assert sanitized['author'] == SAMPLE_OBJECT_ID
        assert sanitized['password'] == '***REDACTED***'

    def test_field_names_are_split_into_words(self):
        for name in ('api_key', 'X-Api-Key', 'accessToken', 'Authorization', 'client_secret'):
            assert ErrorHandlingConfig.is_sensitive_field(name), name
        for name in ('author', 'authors', 'keyboard', 'monkey', 'title'):
            assert not ErrorHandlingConfig.is_sensitive_field(name), name
