import json
import uuid

import pytest

from fclab.History import (
    FileChatHistory, FileHistoryFactory, InMemoryChatHistory,
    in_memory_session_history, to_chat_messages,
)


class TestInMemoryChatHistory:
    def test_add_messages(self):
        history = InMemoryChatHistory()
        history.add_user_message("Meu nome é Adriano")
        history.add_ai_message("Olá, Adriano!")
        assert history.messages == [
            {"role": "user", "content": "Meu nome é Adriano"},
            {"role": "assistant", "content": "Olá, Adriano!"},
        ]

    def test_messages_is_a_copy(self):
        history = InMemoryChatHistory()
        history.add_user_message("oi")
        history.messages.append({"role": "user", "content": "x"})
        assert len(history.messages) == 1

    def test_tool_turn(self):
        history = InMemoryChatHistory()
        history.add_message("tool", "55")
        assert history.messages == [{"role": "tool", "content": "55"}]

    def test_invalid_role(self):
        with pytest.raises(ValueError, match="Unsupported role"):
            InMemoryChatHistory().add_message("system", "x")

    def test_clear(self):
        history = InMemoryChatHistory()
        history.add_user_message("oi")
        history.clear()
        assert history.messages == []


class TestSessionStore:
    def test_same_session_same_history(self):
        session_id = f"session-{uuid.uuid4()}"
        first = in_memory_session_history(session_id)
        first.add_user_message("oi")
        assert in_memory_session_history(session_id) is first
        assert in_memory_session_history(session_id).messages == [{"role": "user", "content": "oi"}]

    def test_sessions_are_isolated(self):
        a = in_memory_session_history(f"session-{uuid.uuid4()}")
        b = in_memory_session_history(f"session-{uuid.uuid4()}")
        a.add_user_message("only in a")
        assert b.messages == []


class TestFileChatHistory:
    def test_path_layout(self, tmp_path):
        history = FileChatHistory("test-session-1", directory=str(tmp_path))
        assert history.path == tmp_path / "user-id" / "test-session-1.jsonl"

    def test_appends_json_lines(self, tmp_path):
        history = FileChatHistory("s1", directory=str(tmp_path), user_id="ana")
        history.add_user_message("Qual é a temperatura em São Paulo?")
        history.add_ai_message("32°C")

        lines = (tmp_path / "ana" / "s1.jsonl").read_text(encoding="utf8").splitlines()
        assert [json.loads(line) for line in lines] == [
            {"role": "user", "content": "Qual é a temperatura em São Paulo?"},
            {"role": "assistant", "content": "32°C"},
        ]
        assert "São Paulo" in lines[0]

    def test_reload(self, tmp_path):
        FileChatHistory("s1", directory=str(tmp_path)).add_user_message("Meu nome é Adriano")
        reloaded = FileChatHistory("s1", directory=str(tmp_path))
        assert reloaded.messages == [{"role": "user", "content": "Meu nome é Adriano"}]

        reloaded.add_ai_message("Prazer!")
        assert len(FileChatHistory("s1", directory=str(tmp_path)).messages) == 2

    def test_missing_file_is_empty(self, tmp_path):
        history = FileChatHistory("new", directory=str(tmp_path))
        assert history.messages == []
        assert not history.path.exists()

    def test_clear_removes_file(self, tmp_path):
        history = FileChatHistory("s1", directory=str(tmp_path))
        history.add_user_message("oi")
        history.clear()
        assert history.messages == []
        assert not history.path.exists()

    def test_factory(self, tmp_path):
        factory = FileHistoryFactory(str(tmp_path), user_id="u")
        history = factory("abc")
        assert isinstance(history, FileChatHistory)
        assert history.path == tmp_path / "u" / "abc.jsonl"

    @pytest.mark.parametrize("session_id, user_id", [
        ("../../escaped", "user-id"),
        ("s1", "../.."),
        ("/tmp/absolute", "user-id"),
    ])
    def test_rejects_paths_outside_directory(self, tmp_path, session_id, user_id):
        directory = tmp_path / "hist"
        with pytest.raises(ValueError, match="escapes directory"):
            FileChatHistory(session_id, directory=str(directory), user_id=user_id)
        assert list(tmp_path.rglob("*.jsonl")) == []

    def test_factory_rejects_escaping_session(self, tmp_path):
        with pytest.raises(ValueError):
            FileHistoryFactory(str(tmp_path / "hist"))("../../escaped")


class TestToChatMessages:
    def test_user_and_assistant_pass_through(self):
        turns = [{"role": "user", "content": "oi"}, {"role": "assistant", "content": "olá"}]
        assert to_chat_messages(turns) == turns

    def test_tool_turn_becomes_assistant_text(self):
        assert to_chat_messages([{"role": "tool", "content": "55"}]) == [
            {"role": "assistant", "content": "Tool result: 55"}
        ]
