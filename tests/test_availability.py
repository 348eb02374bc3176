import itertools
import threading

from linewise.explain.availability import AvailabilityLatch


def test_check_runs_once_and_result_is_kept() -> None:
    calls: list[int] = []

    def check():
        calls.append(1)
        return "provider" if len(calls) == 1 else "later"

    latch = AvailabilityLatch(check)
    assert not latch.checked
    assert latch.get() == "provider"
    assert latch.get() == "provider"
    assert latch.checked
    assert calls == [1]


def test_unavailable_result_is_also_latched() -> None:
    state = {"configured": False}

    latch = AvailabilityLatch(lambda: "provider" if state["configured"] else None)
    assert latch.get() is None
    state["configured"] = True
    assert latch.get() is None
    assert AvailabilityLatch(lambda: "provider" if state["configured"] else None).get() == "provider"


def test_resolved_latch_never_runs_a_check() -> None:
    latch = AvailabilityLatch.resolved(None)
    assert latch.checked
    assert latch.get() is None


def test_concurrent_first_callers_agree() -> None:
    barrier = threading.Barrier(8)
    counter = itertools.count()
    results: list[object] = []

    def check():
        return next(counter)

    latch = AvailabilityLatch(check)

    def worker() -> None:
        barrier.wait()
        results.append(latch.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(set(results)) == 1
    assert latch.get() == results[0]


def test_raising_check_counts_as_unavailable() -> None:
    calls: list[int] = []

    def check():
        calls.append(1)
        raise RuntimeError("provider construction failed")

    latch = AvailabilityLatch(check)
    assert latch.get() is None
    assert latch.checked
    assert latch.get() is None
    assert calls == [1]
