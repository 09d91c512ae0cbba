"""
Service-layer operations for conversations and messages.

Every read, write or delete that takes a conversation id is scoped to the
requesting user: a conversation owned by someone else is treated as missing.
"""

import logging
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from jurisai.database.helpers.transactionManagement import transactional
from jurisai.database.daos.conversation_dao import ConversationDao
from jurisai.database.daos.message_dao import MessagesDao
from jurisai.database.daos.prompt_template_dao import PromptTemplateDao
from jurisai.database.entities.conversations import Conversation, DEFAULT_CONVERSATION_TITLE
from jurisai.database.entities.messages import Message

logger = logging.getLogger(__name__)


def serialize_conversation(conversation: Conversation) -> dict:
    return {
        "id": str(conversation.id),
        "title": conversation.title,
        "createdAt": conversation.created_at.isoformat(),
    }


def serialize_message(message: Message) -> dict:
    return {
        "id": str(message.id),
        "role": message.role,
        "content": message.content,
        "createdAt": message.created_at.isoformat(),
    }


def _require_conversation(session: Session, conversation_id: UUID, user_id: UUID) -> Conversation:
    conversation = ConversationDao().fetchConversationForOwner(session, conversation_id, user_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@transactional
def create_conversation(session: Session, user_id: UUID, title: str = DEFAULT_CONVERSATION_TITLE) -> dict:
    """
    Create a new, empty conversation for a given user.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    user_id : UUID
        Owner of the conversation.
    title : str
        Initial title, the placeholder by default.

    Returns
    -------
    dict
        {'id', 'title', 'createdAt'}
    """
    conversation = Conversation(user_id=user_id, title=title)
    ConversationDao().createConversation(session, conversation)
    return serialize_conversation(conversation)


@transactional
def list_conversations(session: Session, user_id: UUID) -> list[dict]:
    """
    List all conversations for a user, most recent first.
    """
    conversations = ConversationDao().fetchConversationsByUserId(session, user_id)
    return [serialize_conversation(conversation) for conversation in conversations]


@transactional
def get_conversation_messages(session: Session, user_id: UUID, conversation_id: UUID) -> dict:
    """
    Return a conversation and its messages in storage order.

    Returns
    -------
    dict
        {'id', 'title', 'createdAt', 'messages': [{'id', 'role', 'content', 'createdAt'}]}

    Raises
    ------
    HTTPException
        404 unless the conversation exists and is owned by `user_id`.
    """
    conversation = _require_conversation(session, conversation_id, user_id)
    messages = MessagesDao().fetchMessagesByConversationId(session, conversation.id)
    result = serialize_conversation(conversation)
    result["messages"] = [serialize_message(message) for message in messages]
    return result


@transactional
def delete_conversation(session: Session, user_id: UUID, conversation_id: UUID) -> bool:
    """
    Delete a conversation and its messages.

    Succeeds when nothing matches so that repeated calls never fail.

    Returns
    -------
    bool
        True if a conversation was removed.
    """
    conversation = ConversationDao().fetchConversationForOwner(session, conversation_id, user_id)
    if conversation is None:
        return False
    MessagesDao().deleteMessagesByConversationIds(session, [conversation.id])
    ConversationDao().deleteConversationForOwner(session, conversation.id, user_id)
    return True


@transactional
def open_chat_turn(session: Session, user_id: UUID, conversation_id: UUID | None, prompt_name: str) -> dict:
    """
    Load everything a chat turn needs before the new message is stored.

    A conversation is created first when `conversation_id` is None.

    Returns
    -------
    dict
        {'conversationId', 'title', 'history': [{'role', 'content'}], 'systemPrompt': str | None}

    Raises
    ------
    HTTPException
        404 if `conversation_id` is given but not owned by `user_id`.
    """
    conversation_dao = ConversationDao()
    if conversation_id is None:
        conversation = Conversation(user_id=user_id)
        conversation_dao.createConversation(session, conversation)
        logger.info("Conversation %s created implicitly for user %s", conversation.id, user_id)
    else:
        conversation = _require_conversation(session, conversation_id, user_id)

    history = [
        {"role": message.role, "content": message.content}
        for message in MessagesDao().fetchMessagesByConversationId(session, conversation.id)
    ]
    template = PromptTemplateDao().fetchPublishedByName(session, prompt_name)
    return {
        "conversationId": conversation.id,
        "title": conversation.title,
        "history": history,
        "systemPrompt": template.content if template is not None else None,
    }


@transactional
def rename_conversation(session: Session, conversation_id: UUID, user_id: UUID, title: str) -> None:
    conversation = _require_conversation(session, conversation_id, user_id)
    ConversationDao().updateConversationTitle(session, conversation, title)


@transactional
def append_message(session: Session, conversation_id: UUID, role: str, content: str) -> dict:
    """
    Append one message to a conversation and touch its `updated_at`.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    conversation_id : UUID
        Parent conversation.
    role : str
        Sender role ('user' or 'assistant').
    content : str
        Message body.

    Returns
    -------
    dict
        {'id', 'role', 'content', 'createdAt'}
    """
    message = MessagesDao().appendMessage(session, conversation_id, role, content)
    ConversationDao().touchConversation(session, conversation_id)
    return serialize_message(message)
