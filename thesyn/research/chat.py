"""
Chat Session Manager - context-seeded conversation with a document.

Every turn rebuilds the full conversation from scratch: two seed turns that
hand Gemini the document, the visible history, then the new message. No
server-side chat session is kept. Failures are absorbed into an apology
turn instead of being retried.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from google.genai import types

from .errors import InvalidInputError
from .gemini_client import GeminiClient, response_text
from .models import (
    ChatMessage,
    ChatReply,
    ChatRole,
    DocumentContext,
    PdfContext,
    UrlContext,
)

logger = logging.getLogger(__name__)

CHAT_SYSTEM_INSTRUCTION = """You are a helpful research assistant. Answer questions strictly based on the provided research paper context. If the answer is not in the context, state that.

IMPORTANT: Respond in clean plain text only.
- Do not use any Markdown formatting such as bold, italics, headings, bullet points, or symbols.
- Do not wrap text with asterisks (*), hashes (#), dashes (-), or any special formatting markers.
- Write every answer in simple, natural, paragraph-style plain text.
- Keep explanations clear, direct, and conversational.
- Do not add decorative formatting. No bold, no italics, no lists, no emojis.
- If you need to emphasize something, use natural language instead of formatting."""

SEED_ACKNOWLEDGEMENT = "I have read the paper. How can I help you?"
CHAT_GREETING = "Hello! I've analyzed the paper. What would you like to know?"
CHAT_ERROR_REPLY = "Sorry, I encountered an error processing your request."
CHAT_EMPTY_REPLY = "I couldn't generate a response."

# Pasted text beyond this is dropped from the seed turn
MAX_SEED_TEXT_CHARS = 30000


def build_seed_turns(context: DocumentContext) -> List[types.Content]:
    """The two synthetic turns that give Gemini the document."""
    if isinstance(context, PdfContext):
        parts = [
            types.Part.from_text(text="Here is the research paper to reference:"),
            types.Part.from_bytes(data=context.raw_bytes(), mime_type="application/pdf"),
        ]
    elif isinstance(context, UrlContext):
        parts = [
            types.Part.from_text(
                text=f"Here is the URL of the research paper to reference: {context.content}"
            )
        ]
    else:
        parts = [
            types.Part.from_text(
                text="Here is the text of the research paper to reference:\n\n"
                + context.content[:MAX_SEED_TEXT_CHARS]
            )
        ]

    return [
        types.Content(role=ChatRole.USER.value, parts=parts),
        types.Content(
            role=ChatRole.MODEL.value,
            parts=[types.Part.from_text(text=SEED_ACKNOWLEDGEMENT)],
        ),
    ]


def build_chat_contents(
    history: Sequence[ChatMessage],
    new_message: str,
    context: DocumentContext,
) -> List[types.Content]:
    """Seed turns, then the visible history in order, then the new message."""
    contents = build_seed_turns(context)

    for message in history:
        contents.append(
            types.Content(
                role=ChatRole(message.role).value,
                parts=[types.Part.from_text(text=message.text)],
            )
        )

    contents.append(
        types.Content(role=ChatRole.USER.value, parts=[types.Part.from_text(text=new_message)])
    )
    return contents


class ChatSessionManager:
    """
    Stateless chat transport.

    Not wrapped by the RetryPolicy: a retried conversational turn could be
    answered twice.
    """

    def __init__(self, client: GeminiClient):
        self.client = client
        self._config = types.GenerateContentConfig(system_instruction=CHAT_SYSTEM_INSTRUCTION)

    async def reply(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        context: DocumentContext,
    ) -> ChatReply:
        """
        Send one turn and return the model reply.

        Args:
            history: Visible transcript so far, oldest first
            new_message: The user's new message
            context: Document under discussion

        Returns:
            ChatReply; ``is_error`` is set when the request failed
        """
        try:
            contents = build_chat_contents(history, new_message, context)
            response = await self.client.generate(
                model=self.client.config.chat_model,
                contents=contents,
                config=self._config,
            )
        except Exception as e:
            logger.error(f"Chat failed: {e}")
            return ChatReply(text=CHAT_ERROR_REPLY, is_error=True)

        return ChatReply(text=response_text(response) or CHAT_EMPTY_REPLY)

    async def send_turn(
        self,
        history: Sequence[ChatMessage],
        new_message: str,
        context: DocumentContext,
    ) -> str:
        """Send one turn and return only the reply text."""
        return (await self.reply(history, new_message, context)).text


class ChatSession:
    """
    Caller-side transcript for one document conversation.

    Owns the append-only message list and serializes turns so they reach
    Gemini in the order the user sent them.

    Usage:
        session = ChatSession(manager, context)
        reply = await session.send("What is the main finding?")
    """

    def __init__(
        self,
        manager: ChatSessionManager,
        context: DocumentContext,
        greeting: Optional[str] = CHAT_GREETING,
    ):
        self.manager = manager
        self.context = context
        self.messages: List[ChatMessage] = []
        self._lock = asyncio.Lock()

        if greeting:
            self.messages.append(ChatMessage(role=ChatRole.MODEL, text=greeting))

    async def send(self, text: str) -> ChatMessage:
        """
        Append a user message, get the model reply and append it too.

        Returns:
            The model's ChatMessage (``is_error`` set on failure)
        """
        text = (text or "").strip()
        if not text:
            raise InvalidInputError("Chat message is empty")

        async with self._lock:
            history = list(self.messages)
            self.messages.append(ChatMessage(role=ChatRole.USER, text=text))

            reply = await self.manager.reply(history, text, self.context)

            message = ChatMessage(role=ChatRole.MODEL, text=reply.text, is_error=reply.is_error)
            self.messages.append(message)
            return message

    @property
    def transcript(self) -> List[ChatMessage]:
        return list(self.messages)
