"""
Session-keyed conversation transcripts.

A transcript is an ordered list of turns {"role": ..., "content": ...} with
role "user", "assistant" or "tool". Two stores:

    - InMemoryChatHistory: lives for the process
    - FileChatHistory: appended to <directory>/<user_id>/<session_id>.jsonl

The agent takes a `memory` callable mapping a session id to a history, so
either store (or a custom one) can be plugged in:

     agent = Agent(model="gpt-4o", tools=[...], memory=FileHistoryFactory(".history"))
     agent.run("Oi, meu nome é Ana", session_id="session-1")
     agent.run("Qual é o meu nome?", session_id="session-1")
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

ROLES = ("user", "assistant", "tool")


class ChatHistory:
    """Base transcript: subclasses store turns in `_turns` or override the hooks."""

    def __init__(self):
        self._turns: List[dict] = []

    @property
    def messages(self) -> List[dict]:
        return list(self._turns)

    def add_message(self, role: str, content: str):
        if role not in ROLES:
            raise ValueError(f"Unsupported role '{role}', expected one of {', '.join(ROLES)}")
        turn = {"role": role, "content": content}
        self._turns.append(turn)
        self._persist(turn)

    def add_user_message(self, content: str):
        self.add_message("user", content)

    def add_ai_message(self, content: str):
        self.add_message("assistant", content)

    def clear(self):
        self._turns = []

    def _persist(self, turn: dict):
        pass


class InMemoryChatHistory(ChatHistory):
    pass


class FileChatHistory(ChatHistory):
    """
    Transcript backed by a JSON-lines file, one turn per line.

    Existing turns are loaded on construction; new turns are appended as they
    are added, so the file survives across processes.

    Attributes:
        session_id: Opaque session identifier (file name)
        user_id: Subdirectory grouping the sessions of one user
        path: The .jsonl file
    """

    def __init__(self, session_id: str, directory: str = ".history", user_id: str = "user-id"):
        super().__init__()
        self.session_id = session_id
        self.user_id = user_id
        self.path = Path(directory) / user_id / f"{session_id}.jsonl"
        if not self.path.resolve().is_relative_to(Path(directory).resolve()):
            raise ValueError(
                f"History path for session '{session_id}' (user '{user_id}') escapes directory '{directory}'"
            )
        self._turns = self._load()

    def _load(self) -> List[dict]:
        if not self.path.exists():
            return []

        turns = []
        with open(self.path, encoding="utf8") as f:
            for line in f:
                line = line.strip()
                if line:
                    turns.append(json.loads(line))

        logger.debug("Loaded %d turns from %s", len(turns), self.path)
        return turns

    def _persist(self, turn: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf8") as f:
            f.write(json.dumps(turn, ensure_ascii=False) + "\n")

    def clear(self):
        super().clear()
        if self.path.exists():
            self.path.unlink()


# =========================================================
# Session factories
# =========================================================

_SESSION_STORE: Dict[str, InMemoryChatHistory] = {}


def in_memory_session_history(session_id: str) -> InMemoryChatHistory:
    """Process-wide history for `session_id`, created on first use."""
    if session_id not in _SESSION_STORE:
        _SESSION_STORE[session_id] = InMemoryChatHistory()
    return _SESSION_STORE[session_id]


class FileHistoryFactory:
    """Callable mapping a session id to a FileChatHistory under `directory`."""

    def __init__(self, directory: str = ".history", user_id: str = "user-id"):
        self.directory = directory
        self.user_id = user_id

    def __call__(self, session_id: str) -> FileChatHistory:
        return FileChatHistory(session_id, directory=self.directory, user_id=self.user_id)


def to_chat_messages(turns: List[dict]) -> List[dict]:
    """
    Transcript turns -> chat-completions messages.

    Tool turns have no tool_call_id in a flat transcript, so they are replayed
    as assistant text.
    """
    messages = []
    for turn in turns:
        role = turn["role"]
        if role == "tool":
            messages.append({"role": "assistant", "content": f"Tool result: {turn['content']}"})
        else:
            messages.append({"role": role, "content": turn["content"]})
    return messages
