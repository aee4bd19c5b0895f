from supabase import Client
from linkup.core.pagination import Pagination, paginated_response
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.messages.models import MESSAGE_TABLE, CORRESPONDENT_COLUMNS
from linkup.modules.messages.schemas import MessageCreate, MessageResponse, ConversationSummary
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_row(self, message_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table(MESSAGE_TABLE)\
                .select("*")\
                .eq("id_message", message_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Fetching message")
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return result.data[0]

    def _ensure_user_exists(self, user_id: int) -> None:
        result = self.supabase.table("user_")\
            .select("id_user")\
            .eq("id_user", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Recipient not found")

    def send_message(self, sender_id: int, message_data: MessageCreate) -> MessageResponse:
        """Send a message to another account"""
        if sender_id == message_data.id_receiver:
            raise HTTPException(status_code=400, detail="You cannot send a message to yourself")
        try:
            self._ensure_user_exists(message_data.id_receiver)
            result = self.supabase.table(MESSAGE_TABLE).insert({
                "id_sender": sender_id,
                "id_receiver": message_data.id_receiver,
                "content": message_data.content,
                "message_type": message_data.message_type or "text",
                "is_read": False,
                "send_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            raise to_http_exception(e, "Sending message")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to send message")
        return MessageResponse(**result.data[0])

    def list_conversations(self, user_id: int) -> List[ConversationSummary]:
        """One entry per correspondent: latest message and unread count, most recent first"""
        try:
            result = self.supabase.table(MESSAGE_TABLE)\
                .select("*")\
                .or_(f"id_sender.eq.{user_id},id_receiver.eq.{user_id}")\
                .order("send_at", desc=True)\
                .execute()
            rows = result.data or []

            conversations: Dict[int, Dict[str, Any]] = {}
            for row in rows:
                other = row["id_receiver"] if row["id_sender"] == user_id else row["id_sender"]
                conversation = conversations.setdefault(other, {"last_message": row, "unread_count": 0})
                if row["id_receiver"] == user_id and not row.get("is_read"):
                    conversation["unread_count"] += 1

            correspondents: Dict[int, Dict[str, Any]] = {}
            if conversations:
                profiles = self.supabase.table("user_")\
                    .select(CORRESPONDENT_COLUMNS)\
                    .in_("id_user", sorted(conversations))\
                    .execute()
                correspondents = {p["id_user"]: p for p in profiles.data or []}
        except Exception as e:
            raise to_http_exception(e, "Listing conversations")

        return [
            ConversationSummary(
                correspondent_id=other,
                correspondent=correspondents.get(other),
                last_message=MessageResponse(**conversation["last_message"]),
                unread_count=conversation["unread_count"],
            )
            for other, conversation in conversations.items()
        ]

    def get_conversation(self, user_id: int, other_id: int) -> List[MessageResponse]:
        """Messages exchanged between two accounts, oldest first"""
        participants = [user_id, other_id]
        try:
            result = self.supabase.table(MESSAGE_TABLE)\
                .select("*")\
                .in_("id_sender", participants)\
                .in_("id_receiver", participants)\
                .order("send_at")\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Fetching conversation")
        return [
            MessageResponse(**row)
            for row in result.data or []
            if row["id_sender"] != row["id_receiver"]
        ]

    def mark_as_read(self, message_id: int, user_id: int) -> MessageResponse:
        message = self._get_row(message_id)
        if message["id_receiver"] != user_id:
            raise HTTPException(status_code=403, detail="Only the recipient can mark a message as read")
        try:
            result = self.supabase.table(MESSAGE_TABLE)\
                .update({"is_read": True})\
                .eq("id_message", message_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating message")
        return MessageResponse(**(result.data[0] if result.data else {**message, "is_read": True}))

    def delete_message(self, message_id: int, user_id: Optional[int] = None) -> bool:
        """Delete a message; with user_id set, only its sender may do so"""
        message = self._get_row(message_id)
        if user_id is not None and message["id_sender"] != user_id:
            raise HTTPException(status_code=403, detail="Only the sender can delete a message")
        try:
            self.supabase.table(MESSAGE_TABLE)\
                .delete()\
                .eq("id_message", message_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting message")
        return True

    def list_all(self, pagination: Pagination) -> Dict[str, Any]:
        try:
            result = self.supabase.table(MESSAGE_TABLE)\
                .select("*", count="exact")\
                .order("send_at", desc=True)\
                .range(pagination.offset, pagination.range_end)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Listing messages")
        return paginated_response(result.data or [], pagination, result.count)

    def count_messages(self, since: Optional[str] = None) -> int:
        query = self.supabase.table(MESSAGE_TABLE).select("id_message", count="exact")
        if since:
            query = query.gte("send_at", since)
        return query.execute().count or 0
