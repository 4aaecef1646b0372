"""Direct messages between users, grouped into conversations."""

from __future__ import annotations

from typing import Optional

from errors import NotFoundError, ValidationError, require_choice
from models import MESSAGE_TYPES, Message
from store import DomainStore, parse_timestamp


class MessageStore:
    def __init__(self, store: DomainStore):
        self.store = store

    def messages_between(
        self, user_a: str, user_b: str, course_id: Optional[str] = None
    ) -> list[Message]:
        """Messages exchanged by two users, oldest first."""
        pair = {user_a, user_b}
        messages = [
            m for m in self.store.messages
            if {m.sender_id, m.receiver_id} == pair
            and (course_id is None or m.course_id == course_id)
        ]
        messages.sort(key=lambda m: parse_timestamp(m.sent_at))
        return messages

    def unread_count(self, user_id: str) -> int:
        return sum(1 for m in self.store.messages if m.receiver_id == user_id and m.read_at is None)

    def conversations(self, user_id: str) -> list[dict]:
        """One entry per (counterpart, course) the user has exchanged messages with.

        Each entry carries the last message and the user's unread count; newest first.
        """
        threads: dict[tuple, dict] = {}
        for m in self.store.messages:
            if user_id not in (m.sender_id, m.receiver_id):
                continue
            other_id = m.receiver_id if m.sender_id == user_id else m.sender_id
            key = (other_id, m.course_id)
            thread = threads.setdefault(key, {
                "participant_id": other_id,
                "course_id": m.course_id,
                "last_message": None,
                "unread_count": 0,
                "updated_at": None,
            })
            if thread["last_message"] is None or parse_timestamp(m.sent_at) >= parse_timestamp(
                thread["last_message"].sent_at
            ):
                thread["last_message"] = m
                thread["updated_at"] = m.sent_at
            if m.receiver_id == user_id and m.read_at is None:
                thread["unread_count"] += 1

        result = list(threads.values())
        result.sort(key=lambda t: parse_timestamp(t["updated_at"]), reverse=True)
        return result

    def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        course_id: Optional[str] = None,
        type: str = "text",
        file_url: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> Message:
        if not (content or "").strip():
            raise ValidationError("Message content is required")
        require_choice(type, MESSAGE_TYPES, "message type")
        if self.store.get_by_id(self.store.users, sender_id) is None:
            raise NotFoundError("Sender not found")
        if self.store.get_by_id(self.store.users, receiver_id) is None:
            raise NotFoundError("Recipient not found")

        message = Message(
            id=self.store.next_id(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content.strip(),
            sent_at=self.store.now_iso(),
            course_id=course_id,
            type=type,
            file_url=file_url,
            file_name=file_name,
        )
        with self.store.transaction():
            self.store.messages.append(message)
        return message

    def mark_conversation_read(self, user_id: str, other_id: str) -> int:
        """Stamp read_at on unread messages from ``other_id`` to ``user_id``. Returns the count."""
        stamped = 0
        with self.store.transaction():
            now = self.store.now_iso()
            for m in self.store.messages:
                if m.receiver_id == user_id and m.sender_id == other_id and m.read_at is None:
                    m.read_at = now
                    stamped += 1
        return stamped
