"""
Legal Assistant Chat Pipeline: Titles • Prompt Assembly • Completions • Document Q&A
====================================================================================

Purpose
-------
This module wires the conversation store to the chat model:
- Generates a short title for the first message of a conversation.
- Builds the message list (published system prompt + history + new message).
- Persists the user message, calls the model, and persists the assistant reply.
- Answers questions grounded on the text of an uploaded document.

Failure policy
--------------
- Title generation never fails: provider errors and empty output fall back to
  the first 40 characters of the message.
- Chat completion never leaves a user message unanswered: provider errors and
  empty output are replaced by `FALLBACK_ASSISTANT_REPLY`.
- Document answers surface provider errors to the caller (500).

Configuration (settings)
------------------------
- settings.API_KEY       : OpenAI API key.
- settings.OPEN_AI_MODEL : Chat model name for LangChain.
"""

import logging
from functools import lru_cache
from uuid import UUID
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from jurisai.api.prompt_utilities import build_chat_messages, build_document_prompt
from jurisai.database.config.config import settings
from jurisai.database.core.chat_funcs import (
    open_chat_turn,
    rename_conversation,
    append_message,
    get_conversation_messages,
)
from jurisai.database.entities.prompt_template import GENERAL_ASSISTANT_PROMPT_NAME

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 40
FALLBACK_ASSISTANT_REPLY = "Sorry, I could not generate a response right now. Please try again."
TITLE_PROMPT = (
    "Summarize the following user message as a conversation title of at most 5 words. "
    "Answer with the title only.\n\nMessage: {message}"
)
QUOTE_CHARS = "\"'`«»“”‘’"


def lc_text_from_content(content) -> str:
    """Normalize LangChain message content to plain text.

    - If string → return as-is.
    - If list of content parts → concatenates only 'text' parts.
    - Else → str(content).
    """
    # LangChain AIMessage.content can be str OR a list of parts
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if isinstance(p, dict) and p.get("type") == "text")
    if content is None:
        return ""
    return str(content)


def fallback_title(message: str) -> str:
    """First `TITLE_MAX_CHARS` characters of the message, with '...' when cut."""
    message = message.strip()
    if len(message) > TITLE_MAX_CHARS:
        return message[:TITLE_MAX_CHARS] + "..."
    return message


def clean_title(raw: str) -> str:
    """Strip whitespace and wrapping quote characters from a model title."""
    return raw.strip().strip(QUOTE_CHARS).strip()


def to_langchain_messages(messages: list[dict]) -> list[BaseMessage]:
    """Map `{"role", "content"}` dicts to LangChain message objects."""
    mapping = {"system": SystemMessage, "assistant": AIMessage, "user": HumanMessage}
    return [mapping.get(m["role"], HumanMessage)(content=m["content"]) for m in messages]


class LLM_Pipeline:
    """
    Chat orchestration around two LangChain chat models.

    Parameters
    ----------
    chat_model : BaseChatModel, optional
        Model for answers; defaults to `ChatOpenAI` at temperature 0.7.
    title_model : BaseChatModel, optional
        Model for titles; defaults to `ChatOpenAI` at temperature 0.2 capped at 20 tokens.
    """

    def __init__(self, chat_model=None, title_model=None):
        self.model = chat_model or ChatOpenAI(
            model=settings.OPEN_AI_MODEL, api_key=settings.API_KEY, temperature=0.7
        )
        self.title_model = title_model or ChatOpenAI(
            model=settings.OPEN_AI_MODEL, api_key=settings.API_KEY, temperature=0.2, max_tokens=20
        )

    def generate_title(self, message: str) -> str:
        """
        Ask the model for a short title of `message`.

        Returns
        -------
        str
            The cleaned model title, or `fallback_title(message)` on error or
            empty output.
        """
        try:
            response = self.title_model.invoke(TITLE_PROMPT.format(message=message))
            title = clean_title(lc_text_from_content(response.content))
        except Exception as e:
            logger.warning("Title generation failed, using truncated message: %s", e)
            return fallback_title(message)
        return title or fallback_title(message)

    def complete_chat(self, messages: list[dict]) -> str:
        """Run the chat model on `messages` and return its text (may be empty)."""
        response = self.model.invoke(to_langchain_messages(messages))
        return lc_text_from_content(response.content).strip()

    def answer_from_document(self, document_text: str, question: str) -> str:
        """
        Answer `question` using only `document_text`.

        Provider errors propagate.
        """
        prompt = build_document_prompt(document_text, question)
        response = self.model.invoke([HumanMessage(content=prompt)])
        return lc_text_from_content(response.content).strip()

    def run_chat_turn(self, user_id: UUID, conversation_id: UUID | None, message: str) -> dict:
        """
        Process one user message end to end.

        Steps
        -----
        1. Load (or implicitly create) the conversation, its history and the
           published system prompt.
        2. On the first message only, generate and store a title.
        3. Build the message list, then store the user message (own commit).
        4. Call the model; store its reply, or the fallback reply.

        Returns
        -------
        dict
            {'conversationId', 'title', 'updatedTitle', 'messages'}; `updatedTitle`
            is None unless this turn set the title.

        Raises
        ------
        HTTPException
            404 if `conversation_id` is not owned by `user_id`.
        """
        turn = open_chat_turn(
            user_id=user_id, conversation_id=conversation_id, prompt_name=GENERAL_ASSISTANT_PROMPT_NAME
        )
        conversation_id = turn["conversationId"]
        title = turn["title"]
        updated_title = None

        if not turn["history"]:
            updated_title = self.generate_title(message)
            rename_conversation(conversation_id=conversation_id, user_id=user_id, title=updated_title)
            title = updated_title

        if turn["systemPrompt"] is None:
            logger.warning(
                "Prompt '%s' not found or not published; answering without a system prompt.",
                GENERAL_ASSISTANT_PROMPT_NAME,
            )
        messages = build_chat_messages(turn["systemPrompt"], turn["history"], message)

        append_message(conversation_id=conversation_id, role="user", content=message)

        try:
            answer = self.complete_chat(messages)
        except Exception as e:
            logger.exception("Chat completion failed for conversation %s: %s", conversation_id, e)
            answer = ""
        if not answer:
            answer = FALLBACK_ASSISTANT_REPLY

        append_message(conversation_id=conversation_id, role="assistant", content=answer)

        conversation = get_conversation_messages(user_id=user_id, conversation_id=conversation_id)
        return {
            "conversationId": str(conversation_id),
            "title": title,
            "updatedTitle": updated_title,
            "messages": conversation["messages"],
        }


@lru_cache(maxsize=1)
def get_pipeline() -> LLM_Pipeline:
    """FastAPI dependency returning the process-wide pipeline."""
    return LLM_Pipeline()
