from fastapi import APIRouter, Depends
from linkup.core.dependencies import require_role, ROLE_USER, ROLE_ADMIN
from linkup.database.supabase_client import get_supabase
from linkup.modules.messages.schemas import MessageCreate, MessageResponse, ConversationSummary
from linkup.modules.messages.service import MessageService
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/messages", tags=["messages"])

# Messages link user_ accounts; companies are not part of a conversation
participant = require_role(ROLE_USER, ROLE_ADMIN)


def get_message_service(supabase: Client = Depends(get_supabase)) -> MessageService:
    return MessageService(supabase)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    message_data: MessageCreate,
    identity: Dict = Depends(participant),
    service: MessageService = Depends(get_message_service)
):
    return service.send_message(identity["id"], message_data)


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(
    identity: Dict = Depends(participant),
    service: MessageService = Depends(get_message_service)
):
    """Conversation list with latest message and unread count"""
    return service.list_conversations(identity["id"])


@router.get("/with/{other_id}", response_model=List[MessageResponse])
async def get_conversation(
    other_id: int,
    identity: Dict = Depends(participant),
    service: MessageService = Depends(get_message_service)
):
    return service.get_conversation(identity["id"], other_id)


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_as_read(
    message_id: int,
    identity: Dict = Depends(participant),
    service: MessageService = Depends(get_message_service)
):
    return service.mark_as_read(message_id, identity["id"])


@router.delete("/{message_id}")
async def delete_message(
    message_id: int,
    identity: Dict = Depends(participant),
    service: MessageService = Depends(get_message_service)
):
    service.delete_message(message_id, user_id=identity["id"])
    return {"message": "Message deleted successfully"}
