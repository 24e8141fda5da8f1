import time

import pytest

from music_library.errors import NotFoundError, StorageError
from music_library.models.dto import SongDTO, SongFilter


def _song(**overrides):
    data = {
        "group_name": "Muse",
        "song_name": "Supermassive Black Hole",
        "release_date": "2006-07-16",
        "text": "v1\n\nv2",
        "link": "http://x",
    }
    data.update(overrides)
    return SongDTO(**data)


@pytest.mark.unit
def test_create_then_get_by_id_round_trips(repository):
    created = repository.create(_song())

    assert created.id and created.id > 0
    assert created.created_at is not None
    assert created.updated_at is not None

    fetched = repository.get_by_id(created.id)
    assert (fetched.group_name, fetched.song_name, fetched.release_date, fetched.text, fetched.link) == (
        "Muse", "Supermassive Black Hole", "2006-07-16", "v1\n\nv2", "http://x",
    )


@pytest.mark.unit
def test_create_ignores_client_id_and_timestamps(repository):
    created = repository.create(_song(id=999))
    assert created.id != 999


@pytest.mark.unit
def test_create_constraint_violation_raises_storage_error(repository):
    broken = SongDTO.model_construct(group_name=None, song_name="x", release_date="", text="", link="")
    with pytest.raises(StorageError):
        repository.create(broken)
    # Session stays usable after the rollback
    assert repository.create(_song()).id


@pytest.mark.unit
def test_get_missing_raises_not_found(repository):
    with pytest.raises(NotFoundError) as exc_info:
        repository.get_by_id(12345)
    assert exc_info.value.context == {"song_id": 12345}


@pytest.mark.unit
def test_update_overwrites_all_mutable_fields_and_advances_timestamp(repository):
    created = repository.create(_song())
    time.sleep(0.001)

    updated = repository.update(
        SongDTO(id=created.id, group_name="Queen", song_name="Bohemian Rhapsody",
                release_date="1975-10-31", text="Is this the real life?", link="http://q")
    )

    assert updated.id == created.id
    assert (updated.group_name, updated.song_name, updated.release_date, updated.text, updated.link) == (
        "Queen", "Bohemian Rhapsody", "1975-10-31", "Is this the real life?", "http://q",
    )
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


@pytest.mark.unit
def test_update_with_identical_values_still_advances_timestamp(repository):
    created = repository.create(_song())
    updated = repository.update(created)
    assert updated.updated_at > created.updated_at


@pytest.mark.unit
def test_update_missing_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        repository.update(_song(id=4242))


@pytest.mark.unit
def test_delete_then_delete_again_raises_not_found(repository):
    created = repository.create(_song())
    repository.delete(created.id)

    with pytest.raises(NotFoundError):
        repository.get_by_id(created.id)
    with pytest.raises(NotFoundError):
        repository.delete(created.id)


@pytest.mark.unit
def test_list_without_filters_returns_all_in_id_order(repository, factories, db_session):
    rows = factories.SongFactory.create_batch(3)
    db_session.commit()

    songs = repository.list(SongFilter())
    assert [s.id for s in songs] == sorted(r.id for r in rows)


@pytest.mark.unit
def test_list_group_filter_is_case_insensitive_substring(repository, factories, db_session):
    muse = factories.SongFactory(group_name="Muse")
    factories.SongFactory(group_name="Queen")
    museum = factories.SongFactory(group_name="The Museum Band")
    db_session.commit()

    songs = repository.list(SongFilter(group_name="mUsE"))
    assert [s.id for s in songs] == [muse.id, museum.id]


@pytest.mark.unit
def test_list_song_and_release_date_filters(repository, factories, db_session):
    target = factories.SongFactory(song_name="Starlight", release_date="2006-09-04")
    factories.SongFactory(song_name="Starlight", release_date="2010-01-01")
    factories.SongFactory(song_name="Uprising", release_date="2006-09-07")
    db_session.commit()

    songs = repository.list(SongFilter(song_name="STAR", release_date="2006"))
    assert [s.id for s in songs] == [target.id]


@pytest.mark.unit
def test_list_filter_wildcards_match_literally(repository, factories, db_session):
    literal = factories.SongFactory(song_name="100% Pure")
    factories.SongFactory(song_name="100 Pure")
    db_session.commit()

    assert [s.id for s in repository.list(SongFilter(song_name="100%"))] == [literal.id]
    assert repository.list(SongFilter(song_name="_")) == []


@pytest.mark.unit
def test_list_pagination_uses_limit_and_offset(repository, factories, db_session):
    rows = factories.SongFactory.create_batch(5)
    db_session.commit()
    ids = sorted(r.id for r in rows)

    assert [s.id for s in repository.list(SongFilter(page=1, page_size=2))] == ids[0:2]
    assert [s.id for s in repository.list(SongFilter(page=3, page_size=2))] == ids[4:5]
    assert repository.list(SongFilter(page=4, page_size=2)) == []


@pytest.mark.unit
def test_list_without_matches_is_empty(repository, factories, db_session):
    factories.SongFactory(group_name="Muse")
    db_session.commit()
    assert repository.list(SongFilter(group_name="Radiohead")) == []


@pytest.mark.unit
def test_ping_succeeds_against_live_database(repository):
    repository.ping()


@pytest.mark.unit
def test_integers_beyond_sqlite_range_raise_storage_error(repository):
    with pytest.raises(StorageError):
        repository.get_by_id(2**70)

    oversized = SongFilter.model_construct(group_name="", song_name="", release_date="", page=1, page_size=2**70)
    with pytest.raises(StorageError):
        repository.list(oversized)

    # The session was rolled back and is still usable
    assert repository.create(_song()).id > 0
