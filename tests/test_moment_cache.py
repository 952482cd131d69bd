from stayreal.clients import SQLiteBlobStore
from stayreal.services import MomentCache


def test_last_moment_id_is_absent_initially(blob_store: SQLiteBlobStore) -> None:
    assert MomentCache(blob_store).get_last_moment_id() is None


def test_last_write_wins(blob_store: SQLiteBlobStore) -> None:
    cache = MomentCache(blob_store)

    cache.set_last_moment_id("A")
    cache.set_last_moment_id("B")

    assert cache.get_last_moment_id() == "B"


def test_last_moment_id_survives_new_cache_instance(blob_store: SQLiteBlobStore) -> None:
    MomentCache(blob_store).set_last_moment_id("m1")

    assert MomentCache(blob_store).get_last_moment_id() == "m1"
