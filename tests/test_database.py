"""Shared store handle tests."""

import threading

from virtuebox.core.database import Database


def test_engine_is_lazy(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'lazy.db'}")
    assert database._engine is None
    assert not (tmp_path / "lazy.db").exists()


def test_concurrent_first_use_builds_one_engine(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'shared.db'}")
    engines = []
    start = threading.Barrier(10)

    def worker():
        start.wait()
        engines.append(database.engine)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(engines) == 10
    assert len({id(engine) for engine in engines}) == 1
    database.dispose()


def test_dispose_then_reconnect(database):
    first = database.engine
    database.dispose()
    assert database.engine is not first
