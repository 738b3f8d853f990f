"""
Message API routes
All document access goes through the messages service layer.
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException

from models.message import (
    MessageDocument, MessageCreateRequest, MessageUpdateRequest,
    MessageListResponse, MessageUpdateResponse, MessageDeleteResponse
)
from services.base_service import ServiceResult
from services.messages_service import get_messages_service

router = APIRouter()
logger = logging.getLogger(__name__)

# ServiceResult.error_type -> HTTP status
ERROR_STATUS_CODES = {
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT_ERROR": 409,
    "INVALID_QUERY": 400,
}


def raise_for_result(
    result: ServiceResult,
    not_found_detail: str = "Message not found",
    conflict_detail: Optional[str] = None
):
    """Raise the HTTPException matching a failed ServiceResult"""
    if result.success:
        return
    status_code = ERROR_STATUS_CODES.get(result.error_type, 500)
    if status_code == 404:
        detail = not_found_detail
    elif status_code == 409 and conflict_detail:
        detail = conflict_detail
    else:
        detail = result.error
    raise HTTPException(status_code=status_code, detail=detail)


@router.get("", response_model=MessageListResponse)
async def list_messages():
    """List all messages"""
    messages_service = get_messages_service()

    try:
        result = await messages_service.list_messages()
        raise_for_result(result)
        return {"messages": result.data}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list messages: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.get("/{message_id}", response_model=MessageDocument)
async def get_message(message_id: str):
    """Get one message"""
    messages_service = get_messages_service()

    try:
        result = await messages_service.get_message_by_id(message_id)
        raise_for_result(result)
        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get message {message_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.post("", response_model=MessageDocument)
async def create_message(request: MessageCreateRequest):
    """Create a new message"""
    messages_service = get_messages_service()

    try:
        result = await messages_service.create_message(
            title=request.title,
            body=request.body,
            author=request.author,
            message_id=request.id
        )
        raise_for_result(result, conflict_detail="Message ID already exists")

        if not result.data:
            raise HTTPException(status_code=500, detail="No data returned from service")

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create message: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.put("/{message_id}", response_model=MessageUpdateResponse)
async def update_message(message_id: str, request: MessageUpdateRequest):
    """Update message fields; fields left out of the body are unchanged"""
    messages_service = get_messages_service()

    updates = request.to_updates()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    try:
        result = await messages_service.update_message(message_id, updates)
        raise_for_result(result)
        return {"message": result.data[0]}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update message {message_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")


@router.delete("/{message_id}", response_model=MessageDeleteResponse)
async def delete_message(message_id: str):
    """Delete a message"""
    messages_service = get_messages_service()

    try:
        result = await messages_service.delete_message(message_id)
        raise_for_result(result)
        return {"message": "Successfully deleted.", "_id": message_id}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete message {message_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Service error: {str(e)}")
