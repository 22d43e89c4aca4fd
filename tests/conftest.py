import pytest

from fclab.settings import get_settings


class ScriptedLLM:
    """Stands in for query_llm: returns canned replies and records every call."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, messages, **kwargs):
        self.calls.append({"messages": list(messages), **kwargs})
        if not self.replies:
            raise AssertionError("ScriptedLLM ran out of replies")
        return self.replies.pop(0)


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for var in ("FCLAB_MODEL", "FCLAB_CACHE_DIR", "FCLAB_MAX_ITERATIONS", "FCLAB_LOG_PATH"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
