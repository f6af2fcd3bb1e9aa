import importlib

from fastapi.testclient import TestClient

from skillbridge_assistant.agent.explainer import HEADER
from skillbridge_assistant.agent.orchestrator import BLANK_MESSAGE, HINT_MESSAGE


def test_api_chat_sessions_traces_metrics(tmp_path, monkeypatch) -> None:
    (tmp_path / "projeto.txt").write_text(
        "SkillBridge é uma plataforma que conecta pessoas a vagas. "
        "O sistema recomenda trilhas de estudo.",
        encoding="utf-8",
    )
    monkeypatch.setenv("SKILLBRIDGE_DOCS_DIR", str(tmp_path))
    monkeypatch.delenv("SKILLBRIDGE_JOBS_DB", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    # Reload so module-level wiring picks up the environment above.
    main = importlib.reload(importlib.import_module("skillbridge_assistant.api.main"))
    client = TestClient(main.app)

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["synthesis_mode"] == "extractive"

    search = client.post("/chat", json={"message": "vagas de java"})
    assert search.status_code == 200
    payload = search.json()
    assert "Desenvolvedor Java Pleno" in payload["reply"]
    session_id = payload["session_id"]

    follow_up = client.post(
        "/chat", json={"message": "explique esses requisitos", "session_id": session_id}
    )
    assert follow_up.json()["reply"].startswith(HEADER)

    other_session = client.post("/chat", json={"message": "explique esses requisitos"})
    assert other_session.json()["reply"] == HINT_MESSAGE
    assert other_session.json()["session_id"] != session_id

    blank = client.post("/chat", json={"message": "   "})
    assert blank.json()["reply"] == BLANK_MESSAGE

    docs = client.post("/chat", json={"message": "o que diz o pdf?", "session_id": session_id})
    assert "trecho de `projeto.txt`" in docs.json()["reply"]

    trace = client.get(f"/traces/{docs.json()['trace_id']}")
    assert trace.status_code == 200
    assert trace.json()["document_name"] == "projeto.txt"
    assert client.get("/traces/unknown").status_code == 404

    metrics = client.get("/metrics").json()
    assert metrics["total_turns"] >= 5
    assert metrics["synthesis_modes"]["extractive"] >= 1


def test_api_caps_sessions_and_closes_provider(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SKILLBRIDGE_DOCS_DIR", str(tmp_path))
    monkeypatch.setenv("SKILLBRIDGE_MAX_SESSIONS", "3")
    monkeypatch.delenv("SKILLBRIDGE_JOBS_DB", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    main = importlib.reload(importlib.import_module("skillbridge_assistant.api.main"))

    class _ClosingProvider:
        closed = False

        def close(self) -> None:
            self.closed = True

    provider = _ClosingProvider()
    monkeypatch.setattr(main, "_provider", provider)

    with TestClient(main.app) as client:
        for _ in range(10):
            assert client.post("/chat", json={"message": "oi"}).status_code == 200
        assert len(main._sessions) == 3
        assert client.get("/health").json()["active_sessions"] == 3

    assert provider.closed
