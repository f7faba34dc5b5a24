"""Tests for add / reactivate / remove."""

import pytest

from conftest import make_artist
from watchbrainz.core.errors import NetworkError
from watchbrainz.lifecycle import AddOutcome, LifecycleManager, describe_artist


@pytest.fixture
def lifecycle(registry, engine) -> LifecycleManager:
    return LifecycleManager(registry, engine)


class TestAdd:
    def test_add_resolves_inserts_and_seeds(self, lifecycle, catalog, registry, ledger):
        catalog.add_artist("a1", "Broadcast")
        catalog.set_release_groups("a1", 12)

        assert lifecycle.add("Broadcast") is AddOutcome.ADDED

        entity = registry.find("a1")
        assert entity.display_name == "Broadcast"
        assert entity.active is True
        assert ledger.count("a1") == 12
        ledger.conn.execute("SELECT MAX(AddTime) FROM ReleaseGroups")
        assert ledger.conn.fetchone()[0] == 0

    def test_add_by_id_stores_catalog_name(self, lifecycle, catalog, registry):
        catalog.add_artist("0a1b-mbid", "Stereolab", searchable=False)
        assert lifecycle.add("0a1b-mbid") is AddOutcome.ADDED
        assert registry.find("0a1b-mbid").display_name == "Stereolab"

    def test_failed_seed_drops_artist(self, lifecycle, catalog, registry, ledger, engine):
        catalog.add_artist("a1", "Broadcast")
        catalog.set_release_groups("a1", 5)
        catalog.fail_next("a1", *[NetworkError("down")] * 3)

        assert lifecycle.add("Broadcast") is AddOutcome.SEED_FAILED
        assert registry.find("a1") is None

        # A scheduled run must not pick up the back catalog as new releases
        assert engine.sync_all_active_entities() == []
        assert ledger.count() == 0

        assert lifecycle.add("Broadcast") is AddOutcome.ADDED
        ledger.conn.execute("SELECT DISTINCT AddTime FROM ReleaseGroups")
        assert [r[0] for r in ledger.conn.fetchall()] == [0]

    def test_unknown_artist(self, lifecycle, registry, ledger):
        assert lifecycle.add("Nobody") is AddOutcome.NOT_FOUND
        assert registry.find("Nobody") is None
        assert ledger.count() == 0

    def test_already_active_is_noop(self, lifecycle, catalog, registry):
        registry.add("a1", "Broadcast")
        assert lifecycle.add("Broadcast") is AddOutcome.UNCHANGED
        assert catalog.calls == []

    def test_reactivates_without_resync(self, lifecycle, catalog, registry, ledger):
        registry.add("a1", "Broadcast")
        registry.set_active("a1", False)
        catalog.add_artist("a1", "Broadcast")
        catalog.set_release_groups("a1", 5)

        assert lifecycle.add("a1") is AddOutcome.REACTIVATED

        assert registry.find("a1").active is True
        assert ledger.count() == 0
        assert catalog.calls == []

    def test_search_resolving_to_stored_artist_reactivates(self, lifecycle, catalog, registry):
        registry.add("a1", "Broadcast")
        registry.set_active("a1", False)
        catalog.add_artist("a1", "broadcast")

        assert lifecycle.add("broadcast") is AddOutcome.REACTIVATED
        assert registry.find("a1").active is True
        assert registry.find("a1").display_name == "Broadcast"


class TestRemove:
    def test_remove_deactivates(self, lifecycle, registry, ledger):
        registry.add("a1", "Broadcast")
        assert lifecycle.remove("Broadcast") is True
        assert registry.find("a1").active is False
        assert registry.list_active() == []

    def test_remove_unknown_is_noop(self, lifecycle, registry):
        registry.add("a1", "Broadcast")
        assert lifecycle.remove("Stereolab") is False
        assert registry.find("a1").active is True

    def test_remove_then_add_round_trip(self, lifecycle, catalog, registry):
        registry.add("a1", "Broadcast")
        lifecycle.remove("a1")
        assert lifecycle.add("Broadcast") is AddOutcome.REACTIVATED


class TestDescribeArtist:
    def test_summary(self):
        artist = make_artist("a1", "Broadcast", type="Group", country="GB", begin="1995", end="2011")
        assert describe_artist(artist) == "Group from GB 1995-2011"

    def test_open_ended(self):
        artist = make_artist("a1", "X", type=None, country=None, begin=None, end=None)
        assert describe_artist(artist) == "Artist from unknown country present-present"
