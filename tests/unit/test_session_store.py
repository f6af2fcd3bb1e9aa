from skillbridge_assistant.agent.context import ConversationContext, SessionStore
from skillbridge_assistant.types import JobMatch

_MATCH = JobMatch(id=1, title="Dev", company="ACME", location="Remoto", requirements="Java")


def test_unknown_session_starts_empty() -> None:
    store = SessionStore()

    assert store.get("nova") == ConversationContext()
    assert len(store) == 0


def test_saving_past_cap_evicts_oldest_session() -> None:
    store = SessionStore(max_sessions=2)
    store.save("a", ConversationContext().with_matches([_MATCH]))
    store.save("b", ConversationContext())
    store.save("c", ConversationContext())

    assert len(store) == 2
    assert not store.get("a").has_prior_matches


def test_resaving_refreshes_session_position() -> None:
    store = SessionStore(max_sessions=2)
    store.save("a", ConversationContext().with_matches([_MATCH]))
    store.save("b", ConversationContext())
    store.save("a", store.get("a"))
    store.save("c", ConversationContext())

    assert store.get("a").has_prior_matches
    assert len(store) == 2


def test_drop_removes_session() -> None:
    store = SessionStore()
    store.save("a", ConversationContext())
    store.drop("a")
    store.drop("missing")

    assert len(store) == 0
