"""
Tests for record storage and the managers built on it.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from paper_shelf_server.core.chat import ChatCompletionError
from paper_shelf_server.core.citations import build_export
from paper_shelf_server.core.models import ChatMessage, ChatRole, PaperRecord, SearchPaper
from paper_shelf_server.resources import (
    ChatManager,
    ExportWriter,
    JsonRecordStore,
    ListManager,
    SearchHistoryManager,
)


@pytest.fixture
def lists(store: JsonRecordStore) -> ListManager:
    return ListManager(store)


@pytest.fixture
def chats(store: JsonRecordStore) -> ChatManager:
    return ChatManager(store)


class TestJsonRecordStore:
    """Tests for JsonRecordStore."""

    @pytest.mark.asyncio
    async def test_insert_and_get(self, store: JsonRecordStore, temp_storage: Path):
        """Test inserted rows get an id and timestamps."""
        row = await store.insert("paper_lists", {"name": "Reading"})

        assert row["id"]
        assert row["created_at"] == row["updated_at"]
        assert (temp_storage / "paper_lists.json").exists()

        fetched = await store.get("paper_lists", row["id"])
        assert fetched == row

    @pytest.mark.asyncio
    async def test_select_filters_orders_and_limits(self, store: JsonRecordStore):
        """Test equality filters, ordering and limits."""
        for i in range(4):
            await store.insert("papers", {"list_id": "a" if i % 2 == 0 else "b", "title": f"T{i}"})

        rows = await store.select("papers", {"list_id": "a"})
        assert [r["title"] for r in rows] == ["T0", "T2"]

        newest = await store.select("papers", order_by="created_at", descending=True, limit=2)
        assert [r["title"] for r in newest] == ["T3", "T2"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, store: JsonRecordStore):
        """Test update and delete report affected rows."""
        row = await store.insert("papers", {"list_id": "a", "title": "Old"})

        assert await store.update("papers", {"title": "New"}, {"id": row["id"]}) == 1
        assert (await store.get("papers", row["id"]))["title"] == "New"
        assert await store.update("papers", {"title": "x"}, {"id": "missing"}) == 0

        assert await store.delete("papers", {"id": row["id"]}) == 1
        assert await store.get("papers", row["id"]) is None

    @pytest.mark.asyncio
    async def test_unknown_table(self, store: JsonRecordStore):
        """Test unknown tables are rejected."""
        with pytest.raises(ValueError, match="Unknown table"):
            await store.select("users")

    @pytest.mark.asyncio
    async def test_empty_table(self, store: JsonRecordStore):
        """Test reading a table that was never written."""
        assert await store.select("chat_history") == []

    @pytest.mark.asyncio
    async def test_reads_during_writes_see_whole_table(self, store: JsonRecordStore, temp_storage: Path):
        """Test readers never see a partially written table."""
        for i in range(200):
            await store.insert("papers", {"list_id": "a", "title": f"T{i}"})

        async def writer():
            for i in range(30):
                await store.insert("papers", {"list_id": "a", "title": f"New {i}"})

        async def reader() -> list[int]:
            return [len(await store.select("papers")) for _ in range(50)]

        _, first, second = await asyncio.gather(writer(), reader(), reader())

        assert min(first + second) >= 200
        assert len(await store.select("papers")) == 230
        assert sorted(p.name for p in temp_storage.iterdir()) == ["papers.json"]

    @pytest.mark.asyncio
    async def test_insert_unique(self, store: JsonRecordStore):
        """Test insert_unique refuses a row matching the unique fields."""
        in_a = {"list_id": "a", "external_id": "x"}
        in_b = {"list_id": "b", "external_id": "x"}

        first = await store.insert_unique("papers", dict(in_a), in_a)
        again = await store.insert_unique("papers", dict(in_a), in_a)
        other = await store.insert_unique("papers", dict(in_b), in_b)

        assert first is not None
        assert again is None
        assert other is not None
        assert len(await store.select("papers")) == 2

    @pytest.mark.asyncio
    async def test_tie_order(self, store: JsonRecordStore):
        """Test rows with equal sort keys: oldest first ascending, newest first descending."""
        stamp = "2024-01-01T00:00:00+00:00"
        for title in ["A", "B", "C"]:
            await store.insert("papers", {"title": title, "created_at": stamp})

        ascending = await store.select("papers", order_by="created_at")
        descending = await store.select("papers", order_by="created_at", descending=True)

        assert [r["title"] for r in ascending] == ["A", "B", "C"]
        assert [r["title"] for r in descending] == ["C", "B", "A"]


class TestListManager:
    """Tests for ListManager."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, lists: ListManager):
        created = await lists.create_list("  Transformers ", "Attention papers")

        fetched = await lists.get_list(created.id)
        assert fetched.name == "Transformers"
        assert fetched.description == "Attention papers"
        assert fetched.literature_review is None

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, lists: ListManager):
        with pytest.raises(ValueError):
            await lists.create_list("   ")

    @pytest.mark.asyncio
    async def test_missing_list(self, lists: ListManager):
        with pytest.raises(ValueError, match="not found"):
            await lists.get_list("missing")

    @pytest.mark.asyncio
    async def test_list_lists_with_counts(self, lists: ListManager, sample_paper: PaperRecord):
        first = await lists.create_list("First")
        second = await lists.create_list("Second")
        await lists.add_paper(first.id, sample_paper)

        result = await lists.list_lists()

        assert [(paper_list.name, count) for paper_list, count in result] == [
            ("Second", 0),
            ("First", 1),
        ]
        assert result[0][0].id == second.id

    @pytest.mark.asyncio
    async def test_update_list(self, lists: ListManager):
        created = await lists.create_list("Draft")

        updated = await lists.update_list(created.id, name="Final", description="")

        assert updated.name == "Final"
        assert updated.description is None

    @pytest.mark.asyncio
    async def test_add_and_list_papers(self, lists: ListManager, sample_papers: list[PaperRecord]):
        paper_list = await lists.create_list("Reading")
        for paper in sample_papers:
            await lists.add_paper(paper_list.id, paper)

        papers = await lists.list_papers(paper_list.id)

        assert [p.title for p in papers] == ["Paper 0", "Paper 1", "Paper 2"]
        assert all(p.list_id == paper_list.id for p in papers)
        assert papers[0].publication_year == 2020

    @pytest.mark.asyncio
    async def test_duplicate_external_id_rejected(
        self,
        lists: ListManager,
        sample_search_paper: SearchPaper,
    ):
        paper_list = await lists.create_list("Reading")
        saved = await lists.add_paper(paper_list.id, sample_search_paper)
        assert saved.external_id == sample_search_paper.external_id

        with pytest.raises(ValueError, match="already in this list"):
            await lists.add_paper(paper_list.id, sample_search_paper)

        other = await lists.create_list("Other")
        await lists.add_paper(other.id, sample_search_paper)

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_adds(self, lists: ListManager, store: JsonRecordStore):
        paper_list = await lists.create_list("Reading")

        results = await asyncio.gather(
            *[lists.add_paper(paper_list.id, PaperRecord(title="X"), external_id="same") for _ in range(5)],
            return_exceptions=True,
        )

        saved = [r for r in results if not isinstance(r, Exception)]
        refused = [r for r in results if isinstance(r, ValueError)]
        assert len(saved) == 1
        assert len(refused) == 4
        assert len(await store.select("papers", {"external_id": "same"})) == 1

    @pytest.mark.asyncio
    async def test_add_to_missing_list(self, lists: ListManager, sample_paper: PaperRecord):
        with pytest.raises(ValueError):
            await lists.add_paper("missing", sample_paper)

    @pytest.mark.asyncio
    async def test_remove_paper(self, lists: ListManager, sample_paper: PaperRecord):
        paper_list = await lists.create_list("Reading")
        saved = await lists.add_paper(paper_list.id, sample_paper)

        assert await lists.remove_paper(saved.id)
        assert not await lists.remove_paper(saved.id)
        assert await lists.list_papers(paper_list.id) == []

    @pytest.mark.asyncio
    async def test_delete_list_cascades(
        self,
        lists: ListManager,
        chats: ChatManager,
        store: JsonRecordStore,
        sample_papers: list[PaperRecord],
    ):
        doomed = await lists.create_list("Doomed")
        kept = await lists.create_list("Kept")
        for paper in sample_papers:
            await lists.add_paper(doomed.id, paper)
        await lists.add_paper(kept.id, sample_papers[0])

        session = await chats.get_or_create_session(doomed.id, doomed.name)
        await store.insert("chat_messages", {"session_id": session.id, "role": "user", "content": "hi"})
        await chats.create_history(doomed.id)

        removed = await lists.delete_list(doomed.id)

        assert removed == 3
        assert await store.select("chat_sessions") == []
        assert await store.select("chat_messages") == []
        assert await store.select("chat_history") == []
        assert len(await lists.list_papers(kept.id)) == 1
        with pytest.raises(ValueError):
            await lists.get_list(doomed.id)

    @pytest.mark.asyncio
    async def test_save_literature_review_and_summary(
        self,
        lists: ListManager,
        sample_paper: PaperRecord,
    ):
        paper_list = await lists.create_list("Reading")
        saved = await lists.add_paper(paper_list.id, sample_paper)

        await lists.save_literature_review(paper_list.id, "Review")
        updated = await lists.save_summary(saved.id, "Summary")

        assert (await lists.get_list(paper_list.id)).literature_review == "Review"
        assert updated.summary["content"] == "Summary"
        assert "generated_at" in updated.summary


class TestChatManager:
    """Tests for ChatManager."""

    @pytest.mark.asyncio
    async def test_get_or_create_session_reuses(self, chats: ChatManager):
        first = await chats.get_or_create_session("list-1", "Reading")
        again = await chats.get_or_create_session("list-1", "Reading")

        assert first.id == again.id
        assert first.name == "Chat with Reading"

    @pytest.mark.asyncio
    async def test_new_session(self, chats: ChatManager):
        await chats.get_or_create_session("list-1")
        fresh = await chats.new_session("list-1")

        assert fresh.name == "New Chat with Papers"

    @pytest.mark.asyncio
    async def test_send_message(self, chats: ChatManager, sample_papers: list[PaperRecord]):
        client = AsyncMock()
        client.complete.return_value = "From the papers: yes."
        session = await chats.get_or_create_session("list-1", "Reading")

        reply = await chats.send_message(session.id, "Is it good?", sample_papers, client)

        assert reply.role is ChatRole.ASSISTANT
        assert reply.content == "From the papers: yes."

        history = client.complete.call_args.args[0]
        assert [(m.role, m.content) for m in history] == [(ChatRole.USER, "Is it good?")]
        assert client.complete.call_args.kwargs["papers"] == sample_papers

        messages = await chats.load_messages(session.id)
        assert [m.role for m in messages] == [ChatRole.USER, ChatRole.ASSISTANT]
        assert (await chats.get_session(session.id)).name == "Chat about 3 papers"

    @pytest.mark.asyncio
    async def test_send_message_keeps_conversation(self, chats: ChatManager):
        client = AsyncMock()
        client.complete.side_effect = ["First answer", "Second answer"]
        session = await chats.get_or_create_session("list-1")

        await chats.send_message(session.id, "One", [], client)
        await chats.send_message(session.id, "Two", [], client)

        history = client.complete.call_args.args[0]
        assert [m.content for m in history] == ["One", "First answer", "Two"]

    @pytest.mark.asyncio
    async def test_send_blank_message(self, chats: ChatManager):
        session = await chats.get_or_create_session("list-1")
        with pytest.raises(ValueError):
            await chats.send_message(session.id, "  ", [], AsyncMock())

    @pytest.mark.asyncio
    async def test_api_failure_keeps_user_message(self, chats: ChatManager):
        client = AsyncMock()
        client.complete.side_effect = ChatCompletionError("down", status_code=503)
        session = await chats.get_or_create_session("list-1")

        with pytest.raises(ChatCompletionError):
            await chats.send_message(session.id, "Hello?", [], client)

        messages = await chats.load_messages(session.id)
        assert [m.content for m in messages] == ["Hello?"]

    @pytest.mark.asyncio
    async def test_unknown_role_read_as_user(self, chats: ChatManager, store: JsonRecordStore):
        await store.insert("chat_messages", {"session_id": "s1", "role": "tool", "content": "x"})

        messages = await chats.load_messages("s1")

        assert messages[0].role is ChatRole.USER

    @pytest.mark.asyncio
    async def test_history_lifecycle(self, chats: ChatManager, store: JsonRecordStore):
        entry = await chats.create_history("list-1")
        assert entry.title == "New Chat"
        assert entry.messages == []

        await chats.update_history(entry.id, [
            ChatMessage(role=ChatRole.USER, content="Q"),
            ChatMessage(role=ChatRole.ASSISTANT, content="A"),
        ])
        # Malformed snapshot entries are skipped when read back
        await store.insert("chat_history", {"list_id": "list-1", "messages": [{"role": "bot"}, "junk"]})

        history = await chats.list_history("list-1")
        by_id = {h.id: h for h in history}
        assert [m.content for m in by_id[entry.id].messages] == ["Q", "A"]
        assert len(history) == 2
        assert all(h.title == "New Chat" for h in history)

        assert await chats.delete_history(entry.id)
        assert not await chats.delete_history(entry.id)

    @pytest.mark.asyncio
    async def test_get_history(self, chats: ChatManager):
        entry = await chats.create_history("list-1", title="Notes")
        await chats.update_history(entry.id, [ChatMessage(role=ChatRole.USER, content="Q")])

        loaded = await chats.get_history(entry.id)

        assert loaded.title == "Notes"
        assert [m.content for m in loaded.messages] == ["Q"]
        with pytest.raises(ValueError, match="not found"):
            await chats.get_history("missing")


class TestSearchHistoryManager:
    """Tests for SearchHistoryManager."""

    @pytest.mark.asyncio
    async def test_recent_is_limited_newest_first(self, store: JsonRecordStore):
        history = SearchHistoryManager(store, limit=3)
        for i in range(5):
            await history.record(f"query {i}", {"year_from": 2000 + i}, results_count=i)

        recent = await history.recent()

        assert [e.search_query for e in recent] == ["query 4", "query 3", "query 2"]
        assert recent[0].filters_applied == {"year_from": 2004}
        assert recent[0].results_count == 4

    @pytest.mark.asyncio
    async def test_clear(self, store: JsonRecordStore):
        history = SearchHistoryManager(store)
        await history.record("a")
        await history.record("b")

        assert await history.clear() == 2
        assert await history.recent() == []


class TestExportWriter:
    """Tests for ExportWriter."""

    @pytest.mark.asyncio
    async def test_save(self, tmp_path: Path, sample_papers: list[PaperRecord]):
        writer = ExportWriter(tmp_path / "exports")
        export = build_export(sample_papers, "bibtex", list_name="Reading")

        path = await writer.save(export)

        assert path.name == "Reading-citations.bib"
        assert path.read_text(encoding="utf-8") == export.content

    @pytest.mark.asyncio
    async def test_save_sanitizes_name(self, tmp_path: Path, sample_papers: list[PaperRecord]):
        writer = ExportWriter(tmp_path / "exports")
        export = build_export(sample_papers, "apa", list_name="AI/ML: 2024")

        path = await writer.save(export)

        assert path.parent == tmp_path / "exports"
        assert path.name == "AI_ML_ 2024-citations.txt"
