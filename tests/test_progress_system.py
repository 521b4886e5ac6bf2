import json
import logging
from pathlib import Path

from blast.events.bus import EVENT_ACHIEVEMENT_UNLOCKED, EVENT_GAME_OVER, EVENT_PROGRESS_SAVED
from blast.systems.progress_system import ProgressSystem
from blast.utils.progress_store import (
    JsonProgressStore,
    ProgressSnapshot,
    append_score,
    default_save_path,
    merge_history,
    merge_progress,
)
from blast.utils.resources import get_progress_tracker, get_session
from tests.helpers import MemoryProgressStore, build_engine


def test_merge_takes_maxima_and_unions_achievements():
    local = ProgressSnapshot(high_score=500, max_level=3, total_games=4, recent_scores=(10, 20), achievements=("a",))
    other = ProgressSnapshot(high_score=800, max_level=2, total_games=7, recent_scores=(1, 2), achievements=("b", "a"))
    merged = merge_progress(local, other)
    assert merged.high_score == 800
    assert merged.max_level == 3
    assert merged.total_games == 7
    assert merged.recent_scores == (1, 2, 10, 20)
    assert set(merged.achievements) == {"a", "b"}


def test_score_history_keeps_the_most_recent_ten():
    history = ()
    for score in range(15):
        history = append_score(history, score)
    assert history == tuple(range(5, 15))
    merged = merge_progress(ProgressSnapshot(recent_scores=history), ProgressSnapshot(recent_scores=(99,)))
    assert merged.recent_scores == tuple(range(5, 15))


def test_json_store_round_trip(tmp_path):
    store = JsonProgressStore(tmp_path / "nested" / "progress.json")
    assert store.load() is None
    snapshot = ProgressSnapshot(high_score=1200, max_level=4, total_games=9, recent_scores=(5, 6), achievements=("chain_master",))
    store.save(snapshot)
    assert store.load() == snapshot
    assert json.loads(store.path.read_text(encoding="utf-8"))["high_score"] == 1200


def test_corrupt_progress_file_does_not_break_startup(tmp_path, caplog):
    path = tmp_path / "progress.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        engine = build_engine(store=JsonProgressStore(path))
    assert get_progress_tracker(engine.world).high_score == 0
    assert "Could not load progress" in caplog.text


def test_wrongly_shaped_progress_is_rejected(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text(json.dumps({"high_score": 10, "recent_scores": "oops"}), encoding="utf-8")
    engine = build_engine(store=JsonProgressStore(path))
    assert not engine.progress.load_progress()


def test_stored_progress_seeds_the_session():
    store = MemoryProgressStore(ProgressSnapshot(high_score=750, max_level=3, total_games=5))
    engine = build_engine(store=store)
    session = get_session(engine.world)
    assert session.high_score == 750
    assert session.total_games == 5
    assert get_progress_tracker(engine.world).max_level == 3


def test_game_over_is_recorded_and_saved():
    store = MemoryProgressStore()
    engine = build_engine(store=store, start=True)
    saved = []
    engine.bus.subscribe(EVENT_PROGRESS_SAVED, lambda sender, **payload: saved.append(payload["snapshot"]))
    get_session(engine.world).score = 420
    engine.session.end_game()
    tracker = get_progress_tracker(engine.world)
    assert tracker.high_score == 420
    assert tracker.total_games == 1
    assert tracker.recent_scores == [420]
    assert store.snapshot.high_score == 420
    assert saved and saved[-1].recent_scores == (420,)


def test_failing_store_never_interrupts_play(caplog):
    store = MemoryProgressStore(fail=True)
    with caplog.at_level(logging.ERROR):
        engine = build_engine(store=store, start=True)
        engine.bus.emit(EVENT_GAME_OVER, score=100, level=1, high_score=100, new_record=True)
        engine.bus.emit(EVENT_ACHIEVEMENT_UNLOCKED, achievement_id="chain_master", name="Chain Master")
    tracker = get_progress_tracker(engine.world)
    assert tracker.high_score == 100
    assert "chain_master" in tracker.achievements
    assert not engine.progress.save_progress()
    assert "Could not save progress" in caplog.text


def test_sync_merges_with_the_remote_copy():
    local = MemoryProgressStore(ProgressSnapshot(high_score=300, max_level=2, total_games=2, recent_scores=(300,)))
    remote = MemoryProgressStore(
        ProgressSnapshot(high_score=900, max_level=1, total_games=6, recent_scores=(900,), achievements=("high_scorer",))
    )
    engine = build_engine(store=local)
    assert engine.progress.sync(remote)
    for store in (local, remote):
        assert store.snapshot.high_score == 900
        assert store.snapshot.max_level == 2
        assert store.snapshot.total_games == 6
        assert store.snapshot.achievements == ("high_scorer",)
    assert get_session(engine.world).high_score == 900


def test_sync_failure_is_logged_and_ignored(caplog):
    engine = build_engine()
    with caplog.at_level(logging.WARNING):
        assert not engine.progress.sync(MemoryProgressStore(fail=True))
    assert "Progress sync failed" in caplog.text
    assert not engine.progress.sync()


def test_merging_a_snapshot_with_itself_changes_nothing():
    snapshot = ProgressSnapshot(
        high_score=640, max_level=3, total_games=4, recent_scores=(120, 640, 300), achievements=("chain_master",)
    )
    assert merge_progress(snapshot, snapshot) == snapshot
    once = merge_progress(snapshot, ProgressSnapshot(recent_scores=(50,)))
    assert merge_progress(snapshot, once) == once


def test_history_merge_appends_only_unseen_games():
    assert merge_history((900,), (300,)) == (900, 300)
    assert merge_history((900, 300), (900, 300)) == (900, 300)
    assert merge_history((900, 300), (900, 300, 450)) == (900, 300, 450)
    assert merge_history((900, 300, 700), (900, 300)) == (900, 300, 700)
    assert merge_history((), (10, 20)) == (10, 20)


def test_repeated_syncs_do_not_duplicate_history():
    local = MemoryProgressStore(ProgressSnapshot(high_score=300, total_games=1, recent_scores=(300,)))
    remote = MemoryProgressStore(ProgressSnapshot(high_score=900, total_games=1, recent_scores=(900,)))
    engine = build_engine(store=local)
    for _ in range(3):
        assert engine.progress.sync(remote)
    assert get_progress_tracker(engine.world).recent_scores == [900, 300]
    assert remote.snapshot.recent_scores == (900, 300)
    assert local.snapshot.recent_scores == (900, 300)


def test_game_played_between_syncs_is_recorded_once():
    remote = MemoryProgressStore(ProgressSnapshot(recent_scores=(900,)))
    engine = build_engine(store=MemoryProgressStore(), remote=remote, start=True)
    engine.progress.sync()
    get_session(engine.world).score = 450
    engine.session.end_game()
    engine.progress.sync()
    assert remote.snapshot.recent_scores == (900, 450)
    assert get_progress_tracker(engine.world).recent_scores == [900, 450]


def test_default_save_path_lives_in_the_user_home(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    assert default_save_path() == tmp_path / ".blockblast" / "progress.json"
    engine = build_engine()
    progress = ProgressSystem(engine.world, engine.bus)
    assert progress.store.path == default_save_path()
    assert progress.save_progress()
    assert (tmp_path / ".blockblast" / "progress.json").exists()
