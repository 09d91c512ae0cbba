"""
FastAPI Router — Conversations & Messages
=========================================

Endpoints under `/chat`:
- GET    /conversations                 list the user's conversations
- POST   /conversations                 create an empty conversation
- GET    /conversations/{id}            conversation with its messages
- DELETE /conversations/{id}            delete (idempotent)
- POST   /conversations/{id}/messages   send a message and get the reply
- POST   /messages                      send a message to a new conversation

Every route requires a valid session; conversations are scoped to their owner.
"""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from jurisai.api.dependencies import AuthContext, get_auth_context
from jurisai.api.llm_pipeline import LLM_Pipeline, get_pipeline
from jurisai.api.models import NewMessageRequest
from jurisai.api.utils import internal_error
from jurisai.database.core.chat_funcs import (
    create_conversation,
    list_conversations,
    get_conversation_messages,
    delete_conversation,
)

router = APIRouter(prefix="/chat", tags=["chat"])

logger = logging.getLogger(__name__)


@router.get("/conversations")
def get_all_conversations(auth: AuthContext = Depends(get_auth_context)):
    """List conversations, most recent first."""
    try:
        conversations = list_conversations(user_id=auth.id)
    except Exception as e:
        raise internal_error("Could not list conversations", e)
    return {"message": "OK", "conversations": conversations}


@router.post("/conversations", status_code=201)
def new_conversation(auth: AuthContext = Depends(get_auth_context)):
    """Create an empty conversation with the placeholder title."""
    try:
        conversation = create_conversation(user_id=auth.id)
    except Exception as e:
        raise internal_error("Could not create the conversation", e)
    return {"message": "Conversation created", "conversation": conversation}


@router.get("/conversations/{conversation_id}")
def get_messages(conversation_id: UUID, auth: AuthContext = Depends(get_auth_context)):
    """Return a conversation and its messages; 404 unless owned by the user."""
    try:
        conversation = get_conversation_messages(user_id=auth.id, conversation_id=conversation_id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not load the conversation", e)
    return {"message": "OK", **conversation}


@router.delete("/conversations/{conversation_id}")
def remove_conversation(conversation_id: UUID, auth: AuthContext = Depends(get_auth_context)):
    """Delete a conversation. Unknown ids succeed as well."""
    try:
        deleted = delete_conversation(user_id=auth.id, conversation_id=conversation_id)
    except Exception as e:
        raise internal_error("Could not delete the conversation", e)
    if not deleted:
        logger.info("Delete of missing conversation %s by user %s ignored", conversation_id, auth.id)
    return {"message": "Conversation deleted"}


def _send(pipeline: LLM_Pipeline, auth: AuthContext, conversation_id: UUID | None, message: str) -> dict:
    try:
        return pipeline.run_chat_turn(user_id=auth.id, conversation_id=conversation_id, message=message)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Something went wrong while sending the message", e)


@router.post("/conversations/{conversation_id}/messages")
def add_message(
    conversation_id: UUID,
    data: NewMessageRequest,
    auth: AuthContext = Depends(get_auth_context),
    pipeline: LLM_Pipeline = Depends(get_pipeline),
):
    """Append a user message, then the assistant reply.

    Response:
        {conversationId, title, updatedTitle, messages}
    """
    return _send(pipeline, auth, conversation_id, data.message)


@router.post("/messages")
def add_message_to_new_conversation(
    data: NewMessageRequest,
    auth: AuthContext = Depends(get_auth_context),
    pipeline: LLM_Pipeline = Depends(get_pipeline),
):
    """Create a conversation implicitly and send its first message."""
    return _send(pipeline, auth, None, data.message)
