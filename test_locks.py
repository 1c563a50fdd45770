import threading
import time

from utils.locks import KeyedLock


def test_same_key_runs_one_at_a_time():
    locks = KeyedLock()
    inside = []
    overlap = []

    def worker():
        with locks.hold('Class1'):
            inside.append(1)
            if len(inside) > 1:
                overlap.append(True)
            time.sleep(0.02)
            inside.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlap == []


def test_distinct_keys_do_not_block():
    locks = KeyedLock()
    entered = threading.Event()
    release = threading.Event()

    def holder():
        with locks.hold('Class1'):
            entered.set()
            release.wait(5)

    thread = threading.Thread(target=holder)
    thread.start()
    entered.wait(5)
    try:
        done = threading.Event()

        def other():
            with locks.hold('Class2'):
                done.set()

        threading.Thread(target=other).start()
        assert done.wait(1)
    finally:
        release.set()
        thread.join()


def test_entries_are_dropped_after_release():
    locks = KeyedLock()
    with locks.hold('User'):
        assert locks.active_keys() == ['User']
    assert locks.active_keys() == []


def test_lock_released_when_body_raises():
    locks = KeyedLock()
    try:
        with locks.hold('Class1'):
            raise RuntimeError('boom')
    except RuntimeError:
        pass
    with locks.hold('Class1'):
        pass
    assert locks.active_keys() == []
