"""Chat history for the builder conversation."""

import time
from typing import Literal

from pydantic import BaseModel, Field

from core.id import new_message_id


class Explanation(BaseModel):
    """Assistant reply describing a generated or refined app."""
    explanation: str
    files_changed: list[str] = Field(default_factory=list)


class ChatMessage(BaseModel):
    """Chat message."""
    id: str = Field(default_factory=new_message_id)
    role: Literal["user", "assistant"]
    content: str | Explanation
    timestamp: float = Field(default_factory=time.time)

    @property
    def text(self) -> str:
        """Plain text of the message, as fed back into prompts."""
        if isinstance(self.content, Explanation):
            return self.content.explanation
        return self.content


class ChatHistory(BaseModel):
    """Conversation history."""
    messages: list[ChatMessage] = Field(default_factory=list)
    max_history: int = 50

    def add(self, message: ChatMessage) -> None:
        """Add message with limit enforcement."""
        self.messages.append(message)
        if len(self.messages) > self.max_history:
            self.messages = self.messages[-self.max_history:]

    def add_user(self, text: str) -> ChatMessage:
        message = ChatMessage(role="user", content=text)
        self.add(message)
        return message

    def add_assistant(self, explanation: str, files_changed: list[str]) -> ChatMessage:
        message = ChatMessage(
            role="assistant",
            content=Explanation(explanation=explanation, files_changed=files_changed),
        )
        self.add(message)
        return message

    def turns(self) -> list[tuple[str, str]]:
        """(role, text) pairs for prompt building."""
        return [(m.role, m.text) for m in self.messages]

    def clear(self) -> None:
        self.messages = []

    def __len__(self) -> int:
        return len(self.messages)
