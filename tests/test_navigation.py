"""Tests for the navigation engine."""

from __future__ import annotations

import pytest

from albumdeck.errors import FetchError
from albumdeck.navigation import NoOp, PlayTrack, Trigger, decide
from albumdeck.state import Catalog, PlayerState

from fakes import FakeProvider


@pytest.fixture()
def provider():
    return FakeProvider({"ncs": ["a.mp3", "b.mp3"], "lofi": ["c.mp3"]})


@pytest.fixture()
def catalog(provider):
    cat = Catalog(provider)
    cat.refresh()
    return cat


def at(catalog: Catalog, album: int, track: str | None) -> PlayerState:
    """Player state positioned on *track* of album *album*."""
    tracks = catalog.tracks(album)
    source = f"songs/{catalog.album_ids[album]}/{track}" if track else None
    return PlayerState(album_index=album, track_list=tracks, loaded_source=source)


class TestRequestNext:
    def test_next_within_album(self, catalog):
        outcome = decide(at(catalog, 0, "a.mp3"), catalog, Trigger.REQUEST_NEXT)
        assert outcome.decision == PlayTrack(0, 1)
        assert outcome.ok

    def test_last_track_advances_to_next_album(self, catalog):
        outcome = decide(at(catalog, 0, "b.mp3"), catalog, Trigger.REQUEST_NEXT)
        assert outcome.decision == PlayTrack(1, 0)

    def test_last_track_of_last_album_is_noop(self, catalog):
        outcome = decide(at(catalog, 1, "c.mp3"), catalog, Trigger.REQUEST_NEXT)
        assert isinstance(outcome.decision, NoOp)

    def test_unmatched_track_starts_from_first(self, catalog):
        outcome = decide(at(catalog, 0, "gone.mp3"), catalog, Trigger.REQUEST_NEXT)
        assert outcome.decision == PlayTrack(0, 0)

    def test_next_album_fetched_once(self, catalog, provider):
        state = at(catalog, 0, "b.mp3")
        assert provider.track_fetches == ["ncs"]
        decide(state, catalog, Trigger.REQUEST_NEXT)
        decide(state, catalog, Trigger.REQUEST_NEXT)
        assert provider.track_fetches == ["ncs", "lofi"]

    def test_empty_next_album_is_noop(self):
        cat = Catalog(FakeProvider({"ncs": ["a.mp3"], "empty": []}))
        cat.refresh()
        outcome = decide(at(cat, 0, "a.mp3"), cat, Trigger.REQUEST_NEXT)
        assert isinstance(outcome.decision, NoOp)
        assert outcome.ok

    def test_fetch_failure_is_reported(self, catalog, provider):
        provider.fail_tracks.add("lofi")
        state = at(catalog, 0, "b.mp3")
        outcome = decide(state, catalog, Trigger.REQUEST_NEXT)
        assert isinstance(outcome.decision, NoOp)
        assert isinstance(outcome.error, FetchError)
        assert state.album_index == 0
        assert state.track_list == ("a.mp3", "b.mp3")


class TestRequestPrevious:
    def test_previous_within_album(self, catalog):
        outcome = decide(at(catalog, 0, "b.mp3"), catalog, Trigger.REQUEST_PREVIOUS)
        assert outcome.decision == PlayTrack(0, 0)

    def test_first_track_moves_to_last_of_previous_album(self, catalog):
        outcome = decide(at(catalog, 1, "c.mp3"), catalog, Trigger.REQUEST_PREVIOUS)
        assert outcome.decision == PlayTrack(0, 1)

    def test_first_track_of_first_album_is_noop(self, catalog):
        outcome = decide(at(catalog, 0, "a.mp3"), catalog, Trigger.REQUEST_PREVIOUS)
        assert isinstance(outcome.decision, NoOp)

    def test_unmatched_track_is_noop(self, catalog):
        outcome = decide(at(catalog, 1, "gone.mp3"), catalog, Trigger.REQUEST_PREVIOUS)
        assert isinstance(outcome.decision, NoOp)

    def test_empty_previous_album_is_noop(self):
        cat = Catalog(FakeProvider({"empty": [], "ncs": ["a.mp3"]}))
        cat.refresh()
        outcome = decide(at(cat, 1, "a.mp3"), cat, Trigger.REQUEST_PREVIOUS)
        assert isinstance(outcome.decision, NoOp)


class TestTrackEnded:
    def test_advances_within_album(self, catalog):
        outcome = decide(at(catalog, 0, "a.mp3"), catalog, Trigger.TRACK_ENDED)
        assert outcome.decision == PlayTrack(0, 1)

    def test_advances_to_next_album(self, catalog):
        outcome = decide(at(catalog, 0, "b.mp3"), catalog, Trigger.TRACK_ENDED)
        assert outcome.decision == PlayTrack(1, 0)

    def test_catalog_exhausted(self, catalog):
        state = at(catalog, 1, "c.mp3")
        before = PlayerState(**vars(state))
        outcome = decide(state, catalog, Trigger.TRACK_ENDED)
        assert outcome.decision == NoOp("catalog exhausted")
        assert state == before


class TestInert:
    def test_no_album_selected(self, catalog):
        for trigger in Trigger:
            assert isinstance(decide(PlayerState(), catalog, trigger).decision, NoOp)

    def test_empty_catalog(self):
        cat = Catalog(FakeProvider({}))
        cat.refresh()
        for trigger in Trigger:
            assert isinstance(decide(PlayerState(), cat, trigger).decision, NoOp)
