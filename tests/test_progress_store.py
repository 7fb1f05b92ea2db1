import pytest

from joyverse.models.session import GameType
from joyverse.services.progress_store import ChildExistsError

THERAPIST = "482913"


async def test_register_and_get_child(store):
    await store.register_child(THERAPIST, "mia", assigned_themes=["underwater"], assigned_games=[GameType.TYPING])

    child = await store.get_child(THERAPIST, "mia")

    assert child.username == "mia"
    assert child.current_assigned_themes == ["underwater"]
    assert child.preferred_game == GameType.TYPING
    assert child.sessions == []


async def test_usernames_are_unique_per_roster_only(store):
    await store.register_child(THERAPIST, "mia")
    await store.register_child("111111", "mia")

    with pytest.raises(ChildExistsError):
        await store.register_child(THERAPIST, "mia")

    assert await store.list_children(THERAPIST) == ["mia"]
    assert await store.get_child("999999", "mia") is None


async def test_colons_in_codes_and_usernames_do_not_share_documents(store):
    await store.register_child("a", "b:c", assigned_themes=["space"])
    await store.register_child("a:b", "c")

    assert await store.list_children("a") == ["b:c"]
    assert await store.list_children("a:b") == ["c"]
    assert (await store.get_child("a", "b:c")).current_assigned_themes == ["space"]
    assert (await store.get_child("a:b", "c")).current_assigned_themes == []


async def test_sessions_are_seeded_from_the_child(store):
    await store.register_child(
        THERAPIST, "leo", assigned_themes=["space"], assigned_games=[GameType.READING], preferred_story="The Fox"
    )

    session = await store.start_session(THERAPIST, "leo")

    assert session.assigned_themes == ["space"]
    assert session.preferred_game == "reading"
    assert session.preferred_story == "The Fox"
    assert session.typing_results == []
    assert session.typing_analysis is None


async def test_session_ids_are_unique_and_kept_in_order(store):
    await store.register_child(THERAPIST, "leo")

    ids = [(await store.start_session(THERAPIST, "leo")).session_id for _ in range(3)]

    child = await store.get_child(THERAPIST, "leo")
    assert len(set(ids)) == 3
    assert [session.session_id for session in child.sessions] == ids


async def test_start_session_for_unknown_child(store):
    assert await store.start_session(THERAPIST, "ghost") is None


async def test_find_session_needs_the_full_triple(store):
    await store.register_child(THERAPIST, "leo")
    await store.register_child("111111", "leo")
    session = await store.start_session(THERAPIST, "leo")

    assert (await store.find_session(THERAPIST, "leo", session.session_id))[1] == session
    assert await store.find_session("111111", "leo", session.session_id) is None
    assert await store.find_session(THERAPIST, "leo", "nope") is None


async def test_update_session_persists_the_mutation(store):
    await store.register_child(THERAPIST, "leo")
    session = await store.start_session(THERAPIST, "leo")

    result = await store.update_session(
        THERAPIST, "leo", session.session_id, lambda s: s.themes_changed.append("jungle") or "ok"
    )

    assert result == "ok"
    _, stored = await store.find_session(THERAPIST, "leo", session.session_id)
    assert stored.themes_changed == ["jungle"]


async def test_failed_mutation_saves_nothing(store):
    await store.register_child(THERAPIST, "leo")
    session = await store.start_session(THERAPIST, "leo")

    def explode(s):
        s.themes_changed.append("jungle")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await store.update_session(THERAPIST, "leo", session.session_id, explode)

    _, stored = await store.find_session(THERAPIST, "leo", session.session_id)
    assert stored.themes_changed == []


async def test_memory_backend_reports_itself(store):
    assert await store.ping() == "memory"
