import time
from pathlib import Path

from gazette.build import SiteBuilder
from gazette.errors import GazetteError
from gazette.watch import Watcher, WatchState, _ChangeHandler


class DummyEvent:
    def __init__(self, path, is_directory=False, event_type="modified", dest_path=""):
        self.src_path = path
        self.is_directory = is_directory
        self.event_type = event_type
        self.dest_path = dest_path


def test_burst_of_events_costs_one_rebuild(tmp_path):
    calls = []
    watcher = Watcher(lambda: calls.append("built"), [tmp_path])
    for number in range(5):
        watcher.push(tmp_path / f"post-{number}.md")

    assert watcher.tick() is True
    assert watcher.rebuild_pending
    assert watcher.run_pending() is True
    assert calls == ["built"]

    # nothing new arrived
    assert watcher.tick() is False
    assert watcher.run_pending() is False
    assert calls == ["built"]
    assert watcher.builds == 1


def test_request_during_build_runs_once_more(tmp_path):
    calls = []
    watcher = Watcher(lambda: None, [tmp_path])

    def rebuild():
        calls.append(watcher.state)
        if len(calls) == 1:
            # changes saved while the first build is running
            watcher.request_rebuild()
            watcher.request_rebuild()

    watcher.rebuild = rebuild
    watcher.request_rebuild()
    watcher.run_pending()
    assert watcher.rebuild_pending
    watcher.run_pending()
    assert not watcher.rebuild_pending
    assert calls == [WatchState.BUILDING, WatchState.BUILDING]
    assert watcher.state is WatchState.IDLE


def test_failed_rebuild_returns_to_idle(tmp_path):
    attempts = []

    def rebuild():
        attempts.append(1)
        if len(attempts) == 1:
            raise GazetteError("broken post")
        return "ok"

    rebuilt = []
    watcher = Watcher(rebuild, [tmp_path], on_rebuilt=rebuilt.append)
    watcher.push(tmp_path / "a.md")
    watcher.tick()
    assert watcher.run_pending() is True
    assert watcher.state is WatchState.IDLE
    assert rebuilt == []

    watcher.push(tmp_path / "a.md")
    watcher.tick()
    watcher.run_pending()
    assert rebuilt == ["ok"]
    assert watcher.builds == 2


def test_ignored_directories(tmp_path):
    watcher = Watcher(lambda: None, [tmp_path], ignore=[tmp_path / "dist"])
    watcher.push(tmp_path / "dist" / "index.html")
    watcher.push(tmp_path / "dist" / "page" / "2" / "index.html")
    assert watcher.drain() == []

    watcher.push(tmp_path / "source" / "a.md")
    assert watcher.drain() == [tmp_path / "source" / "a.md"]


def test_change_handler_forwards_file_events(tmp_path):
    watcher = Watcher(lambda: None, [tmp_path])
    handler = _ChangeHandler(watcher)
    handler.on_any_event(DummyEvent(str(tmp_path / "source"), is_directory=True))
    handler.on_any_event(DummyEvent(str(tmp_path / "source" / "a.md")))
    assert watcher.drain() == [Path(tmp_path / "source" / "a.md")]


def test_change_handler_skips_read_events(tmp_path):
    watcher = Watcher(lambda: None, [tmp_path])
    handler = _ChangeHandler(watcher)
    for event_type in ("opened", "closed_no_write", "closed"):
        handler.on_any_event(DummyEvent(str(tmp_path / "a.md"), event_type=event_type))
    assert watcher.drain() == []

    handler.on_any_event(
        DummyEvent(str(tmp_path / "a.md"), event_type="moved", dest_path=str(tmp_path / "b.md"))
    )
    handler.on_any_event(DummyEvent(str(tmp_path / "c.md"), event_type="deleted"))
    assert watcher.drain() == [tmp_path / "a.md", tmp_path / "b.md", tmp_path / "c.md"]


def test_unwatched_siblings_are_dropped(tmp_path):
    (tmp_path / "source").mkdir()
    config_file = tmp_path / "gazette.yaml"
    config_file.write_text("", encoding="utf-8")
    watcher = Watcher(lambda: None, [tmp_path / "source", config_file])

    watcher.push(tmp_path / "README.md")
    watcher.push(tmp_path / ".git" / "index")
    assert watcher.drain() == []

    watcher.push(config_file)
    watcher.push(tmp_path / "source" / "posts" / "a.md")
    assert watcher.drain() == [config_file, tmp_path / "source" / "posts" / "a.md"]


def wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.05)
    return False


def test_one_edit_settles_after_one_rebuild(project, write_doc):
    output = project / "dist"
    builder = SiteBuilder(project)
    builder.rebuild()
    watcher = Watcher(
        builder.rebuild,
        [project / "source", project / "themes" / "default", project / "gazette.yaml"],
        interval=0.1,
        ignore=[output, output.with_name("dist.staging"), output.with_name("dist.previous")],
    )
    watcher.start()
    try:
        write_doc(project / "source" / "posts", "a.md", "A", "2024-01-01")
        assert wait_for(lambda: watcher.builds >= 1)
        # the rebuild reads every template and document
        time.sleep(1.0)
        settled = watcher.builds
        time.sleep(1.0)
        assert watcher.builds == settled
        assert settled <= 2
    finally:
        watcher.stop()
    assert ">A</a>" in (output / "index.html").read_text(encoding="utf-8")


def test_start_and_stop(monkeypatch, tmp_path):
    scheduled = []

    class DummyObserver:
        def schedule(self, handler, path, recursive):
            scheduled.append((path, recursive))

        def start(self):
            scheduled.append("started")

        def stop(self):
            scheduled.append("stopped")

        def join(self):
            scheduled.append("joined")

    monkeypatch.setattr("gazette.watch.Observer", DummyObserver)
    (tmp_path / "source").mkdir()
    config_file = tmp_path / "gazette.yaml"
    config_file.write_text("", encoding="utf-8")

    watcher = Watcher(
        lambda: None,
        [tmp_path / "source", config_file, tmp_path / "missing"],
        interval=0.01,
    )
    watcher.start()
    watcher.stop()
    assert (str(tmp_path / "source"), True) in scheduled
    assert (str(tmp_path), False) in scheduled
    assert len([s for s in scheduled if isinstance(s, tuple)]) == 2
    assert scheduled[-2:] == ["stopped", "joined"]
