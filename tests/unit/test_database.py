"""Integration tests for database layer."""

from datetime import datetime

import pytest
from sqlalchemy.orm import Session

from feed_aggregator.models import ChannelModel, EntryModel
from feed_aggregator.models.channel import ChannelCreate, ChannelUpdate
from feed_aggregator.storage.database import DatabaseManager
from feed_aggregator.storage.repositories import ChannelRepository, EntryRepository


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Session:
    """Create a test database session."""
    with db_manager.session() as session:
        yield session


def add_entries(session: Session, channel_id: int, *links: str) -> list[EntryModel]:
    return EntryRepository(session).add_all(
        [EntryModel(channel_id=channel_id, link=link, title=link) for link in links]
    )


class TestChannelRepository:
    """Tests for ChannelRepository."""

    def test_create_channel(self, db_session: Session):
        repo = ChannelRepository(db_session)

        channel = repo.create(ChannelCreate(url="https://example.com/rss", name="Example", ttl=600))

        assert channel.id is not None
        assert channel.url == "https://example.com/rss"
        assert channel.ttl == 600
        assert channel.last_refresh is None
        assert channel.created_at is not None

    def test_same_url_may_be_subscribed_twice(self, db_session: Session):
        repo = ChannelRepository(db_session)

        first = repo.create(ChannelCreate(url="https://example.com/rss"))
        second = repo.create(ChannelCreate(url="https://example.com/rss"))

        assert first.id != second.id
        assert repo.get_by_url("https://example.com/rss").id == first.id

    def test_get_by_id_missing(self, db_session: Session):
        assert ChannelRepository(db_session).get_by_id(999) is None

    def test_exists(self, db_session: Session):
        repo = ChannelRepository(db_session)
        channel = repo.create(ChannelCreate(url="https://example.com/rss"))

        assert repo.exists(channel.id) is True
        assert repo.exists(channel.id + 1) is False

    def test_update_only_set_fields(self, db_session: Session):
        repo = ChannelRepository(db_session)
        channel = repo.create(ChannelCreate(url="https://example.com/rss", name="Old", ttl=600))

        updated = repo.update(channel, ChannelUpdate(ttl=60))

        assert updated.name == "Old"
        assert updated.ttl == 60

    def test_update_refresh_time(self, db_session: Session):
        repo = ChannelRepository(db_session)
        channel = repo.create(ChannelCreate(url="https://example.com/rss"))
        when = datetime(2024, 1, 1, 12, 0, 0)

        assert repo.update_refresh_time(channel.id, when) == 1
        db_session.expire_all()
        assert repo.get_by_id(channel.id).last_refresh == when

    def test_update_refresh_time_missing_channel(self, db_session: Session):
        assert ChannelRepository(db_session).update_refresh_time(999, datetime(2024, 1, 1)) == 0

    def test_list_and_count(self, db_session: Session):
        repo = ChannelRepository(db_session)
        for i in range(3):
            repo.create(ChannelCreate(url=f"https://example.com/{i}/rss", ttl=i))

        assert [c.ttl for c in repo.list()] == [0, 1, 2]
        assert [c.ttl for c in repo.list(order_by="ttl", order_desc=True, limit=2)] == [2, 1]
        assert repo.count() == 3
        assert repo.count(ttl=1) == 1

    def test_delete(self, db_session: Session):
        repo = ChannelRepository(db_session)
        channel = repo.create(ChannelCreate(url="https://example.com/rss"))

        repo.delete(channel)

        assert repo.count() == 0


class TestEntryRepository:
    """Tests for EntryRepository."""

    def test_add_all_assigns_ids(self, db_session: Session):
        entries = add_entries(db_session, 1, "https://a/1", "https://a/2")

        assert all(entry.id is not None for entry in entries)
        assert entries[0].contents == []
        assert entries[0].authors == []

    def test_json_columns_round_trip(self, db_session: Session):
        repo = EntryRepository(db_session)
        repo.add_all([
            EntryModel(
                channel_id=1,
                link="https://a/1",
                contents=[{"type": "text/html", "value": "<p>x</p>"}],
                authors=["Alice", "Bob"],
            )
        ])
        db_session.expire_all()

        stored = repo.list_all()[0]
        assert stored.contents == [{"type": "text/html", "value": "<p>x</p>"}]
        assert stored.authors == ["Alice", "Bob"]

    def test_list_by_channels(self, db_session: Session):
        add_entries(db_session, 1, "https://a/1", "https://a/2")
        add_entries(db_session, 2, "https://b/1")
        add_entries(db_session, 3, "https://c/1")
        repo = EntryRepository(db_session)

        assert [e.link for e in repo.list_by_channels([1, 3])] == ["https://a/1", "https://a/2", "https://c/1"]
        assert repo.list_by_channels([]) == []
        assert len(repo.list_all()) == 4

    def test_existing_links(self, db_session: Session):
        add_entries(db_session, 1, "https://a/1")
        add_entries(db_session, 2, "https://b/1")

        links = EntryRepository(db_session).existing_links([1])

        assert links == {(1, "https://a/1")}

    def test_delete_by_channels(self, db_session: Session):
        add_entries(db_session, 1, "https://a/1", "https://a/2")
        add_entries(db_session, 2, "https://b/1")
        repo = EntryRepository(db_session)

        assert repo.delete_by_channels([1]) == 2
        assert repo.count() == 1
        assert repo.count(channel_id=2) == 1
        assert repo.delete_by_channels([]) == 0


class TestDatabaseManager:
    """Tests for DatabaseManager."""

    def test_memory_database_shared_across_sessions(self, db_manager: DatabaseManager):
        with db_manager.session() as session:
            session.add(ChannelModel(url="https://example.com/rss"))

        with db_manager.session() as session:
            assert session.query(ChannelModel).count() == 1

    def test_rollback_on_error(self, db_manager: DatabaseManager):
        with pytest.raises(RuntimeError):
            with db_manager.session() as session:
                session.add(ChannelModel(url="https://example.com/rss"))
                session.flush()
                raise RuntimeError("boom")

        with db_manager.session() as session:
            assert session.query(ChannelModel).count() == 0

    def test_file_database(self, tmp_path):
        path = tmp_path / "nested" / "feeds.db"

        with DatabaseManager(str(path)) as manager:
            manager.init_db()
            with manager.session() as session:
                session.add(ChannelModel(url="https://example.com/rss"))

        assert path.exists()

    def test_init_db_drop_all(self, db_manager: DatabaseManager):
        with db_manager.session() as session:
            session.add(ChannelModel(url="https://example.com/rss"))

        db_manager.init_db(drop_all=True)

        with db_manager.session() as session:
            assert session.query(ChannelModel).count() == 0
