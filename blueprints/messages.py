"""Messaging routes shared by every role."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from extensions import get_store
from helpers import current_user_id, json_body, role_required, serialize
from message_store import MessageStore
from models import to_dict
from user_store import UserStore

bp = Blueprint("messages", __name__, url_prefix="/api/messages")

ANY_ROLE = ("admin", "teacher", "student")


@bp.route("/conversations")
@role_required(*ANY_ROLE)
def conversations():
    store = get_store()
    users = UserStore(store)
    uid = current_user_id()
    result = []
    for thread in MessageStore(store).conversations(uid):
        other = users.get(thread["participant_id"])
        result.append({
            **thread,
            "participant_name": other.full_name if other else "Unknown",
            "last_message": to_dict(thread["last_message"]),
        })
    return jsonify({"conversations": result, "unread_total": MessageStore(store).unread_count(uid)})


@bp.route("/<other_id>")
@role_required(*ANY_ROLE)
def thread(other_id):
    """Messages with one user; opening the thread marks incoming ones read."""
    messages = MessageStore(get_store())
    uid = current_user_id()
    items = messages.messages_between(uid, other_id, request.args.get("course_id"))
    messages.mark_conversation_read(uid, other_id)
    return jsonify(serialize(items))


@bp.route("/<other_id>", methods=["POST"])
@role_required(*ANY_ROLE)
def send(other_id):
    data = json_body()
    message = MessageStore(get_store()).send_message(
        sender_id=current_user_id(),
        receiver_id=other_id,
        content=data.get("content", ""),
        course_id=data.get("course_id"),
        type=data.get("type", "text"),
        file_url=data.get("file_url"),
        file_name=data.get("file_name"),
    )
    return jsonify(to_dict(message)), 201
