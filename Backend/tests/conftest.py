# tests/conftest.py
"""
Shared pytest fixtures for the HackForge backend.

Provides:
- An httpx client wired to the app through ASGITransport
- Fresh in-memory project and offline stores per test
- A patched Gemini provider so no test reaches the network
"""
import pytest
import pytest_asyncio
from faker import Faker
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock, patch

from hackforge import db
from hackforge.core.rate_limit import limiter
from hackforge.main import app
from hackforge.services.offline_store import offline_store
from hackforge.services.project_store import MemoryProjectStore


# Route limits are exercised explicitly in test_rate_limit.py
limiter.enabled = False


SAMPLE_CODE = """function TodoApp() {
  const [todos, setTodos] = React.useState([]);
  const [text, setText] = React.useState("");

  function addTodo(event) {
    event.preventDefault();
    setTodos([...todos, { id: Date.now(), text }]);
    setText("");
  }

  return (
    <form onSubmit={addTodo}>
      <input value={text} onChange={(e) => setText(e.target.value)} />
      <ul>{todos.map((t) => <li key={t.id}>{t.text}</li>)}</ul>
    </form>
  );
}
"""


# ═══════════════════════════════════════════════════════
# FIXTURES - HTTP
# ═══════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def async_client():
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ═══════════════════════════════════════════════════════
# FIXTURES - Storage
# ═══════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def memory_store():
    """Each test starts with empty project and offline stores."""
    store = MemoryProjectStore()
    db.set_store(store)
    offline_store.clear()
    yield store
    offline_store.clear()


@pytest.fixture
def fake():
    return Faker()


# ═══════════════════════════════════════════════════════
# FIXTURES - LLM
# ═══════════════════════════════════════════════════════

@pytest.fixture
def mock_gemini():
    """Replace the Gemini HTTP call with a canned response."""
    with patch("hackforge.llm.providers.gemini.call", new_callable=AsyncMock) as mocked:
        mocked.return_value = {
            "text": SAMPLE_CODE,
            "usage": {"input": 120, "output": 180, "total": 300},
        }
        yield mocked


@pytest.fixture
def sample_code():
    return SAMPLE_CODE
