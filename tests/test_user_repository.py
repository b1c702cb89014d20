import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.pool import NullPool

from api.data import Player, create_session_factory, session_scope, upsert_player
from api.errors import StoreError
from api.services.display_name_service import DISPLAY_NAME_PATTERN


def _count_players(session_factory, google_id):
    with session_scope(session_factory) as session:
        return len(session.execute(
            select(Player).where(Player.google_id == google_id)
        ).scalars().all())


class TestUpsertPlayer:
    def test_creates_player_on_first_sight(self, session_factory):
        player = upsert_player(
            session_factory, "sub-1", "a@example.com", "Alice", "https://img/a.png"
        )

        assert player.id is not None
        assert player.google_id == "sub-1"
        assert player.email == "a@example.com"
        assert player.total_score == 0
        assert DISPLAY_NAME_PATTERN.match(player.display_name)

    def test_second_login_keeps_id_and_display_name(self, session_factory):
        first = upsert_player(session_factory, "sub-1", "a@example.com", "Alice", None)
        second = upsert_player(
            session_factory, "sub-1", "new@example.com", "Alice B", "https://img/new.png"
        )

        assert second.id == first.id
        assert second.display_name == first.display_name
        assert second.email == "new@example.com"
        assert second.name == "Alice B"
        assert second.picture == "https://img/new.png"
        assert _count_players(session_factory, "sub-1") == 1

    def test_existing_player_never_gets_a_new_display_name(self, session_factory):
        upsert_player(session_factory, "sub-1", None, None, None, name_generator=lambda: "panda#0001")
        again = upsert_player(
            session_factory, "sub-1", None, None, None, name_generator=lambda: "ikan#9999"
        )
        assert again.display_name == "panda#0001"

    def test_total_score_is_returned_untouched(self, session_factory):
        created = upsert_player(session_factory, "sub-1", None, None, None)
        with session_scope(session_factory) as session:
            session.get(Player, created.id).total_score = 420
            session.commit()

        again = upsert_player(session_factory, "sub-1", "a@example.com", None, None)
        assert again.total_score == 420

    def test_missing_profile_fields_stay_null(self, session_factory):
        player = upsert_player(session_factory, "sub-1", None, None, None)
        data = player.to_dict()
        assert data["email"] is None
        assert data["name"] is None
        assert data["picture"] is None

    def test_different_subjects_get_different_players(self, session_factory):
        a = upsert_player(session_factory, "sub-a", None, None, None)
        b = upsert_player(session_factory, "sub-b", None, None, None)
        assert a.id != b.id

    def test_to_dict_shape(self, session_factory):
        player = upsert_player(session_factory, "sub-1", "a@example.com", "Alice", None)
        assert set(player.to_dict()) == {
            "id", "google_id", "email", "name", "picture", "display_name", "total_score",
        }


class TestConcurrentFirstLogin:
    def test_lost_insert_race_reuses_the_winner(self, session_factory):
        """Another request inserts the same subject between our read and our insert."""
        winner = {}

        def racing_name_generator():
            # Runs after the "not found" read, before the insert
            winner.update(upsert_player(
                session_factory, "sub-race", "first@example.com", "First", None,
                name_generator=lambda: "kucing#1111",
            ).to_dict())
            return "burung#2222"

        loser = upsert_player(
            session_factory, "sub-race", "second@example.com", "Second", None,
            name_generator=racing_name_generator,
        )

        assert loser.id == winner["id"]
        assert loser.display_name == "kucing#1111"
        # The losing request still refreshes the mutable fields
        assert loser.email == "second@example.com"
        assert _count_players(session_factory, "sub-race") == 1


class TestStoreFailures:
    def test_missing_table_raises_store_error(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool)
        session_factory = create_session_factory(engine)

        with pytest.raises(StoreError) as exc_info:
            upsert_player(session_factory, "sub-1", None, None, None)

        assert exc_info.value.status == 500
        assert exc_info.value.error == "Authentication failed"

    def test_session_is_released_after_failure(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool)
        make_session = create_session_factory(engine)
        closed = []

        def tracking_factory():
            session = make_session()
            original_close = session.close

            def close():
                closed.append(True)
                original_close()

            session.close = close
            return session

        with pytest.raises(StoreError):
            upsert_player(tracking_factory, "sub-1", None, None, None)

        assert closed == [True]
