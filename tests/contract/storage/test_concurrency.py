"""Concurrency contracts for ServiceStorage.

These assert that racing writers are arbitrated by the store itself: for each
contended slot exactly one writer wins and every other one gets a
ConflictError. SQL adapters run on engines where each thread checks out its
own connection.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Literal

import pytest

from svcatalog.domain import EMPTY_FILTER, ConflictError, Page, Service
from svcatalog.domain.model import new_service, new_version

pytestmark = [pytest.mark.slow]

WORKERS = 8

Outcome = tuple[Literal["ok", "err"], object]


def race(action: Callable[[int], object], workers: int = WORKERS) -> list[Outcome]:
    """Run ``action(i)`` on ``workers`` threads released at the same instant."""
    barrier = threading.Barrier(workers)
    results: list[Outcome] = []
    lock = threading.Lock()  # protect results append

    def worker(i: int) -> None:
        try:  # pylint: disable=too-many-try-statements
            barrier.wait(timeout=5)
            result = action(i)
            with lock:
                results.append(("ok", result))
        except (ConflictError, threading.BrokenBarrierError) as e:
            with lock:
                results.append(("err", e))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    assert len(results) == workers, "a worker failed unexpectedly"
    return results


def _split(results: list[Outcome]) -> tuple[list[object], list[object]]:
    oks = [r for kind, r in results if kind == "ok"]
    errs = [r for kind, r in results if kind == "err"]
    return oks, errs


def test_racing_creations_with_same_id(concurrent_store):
    """Creating one id from many threads: one wins, the rest conflict."""
    results = race(
        lambda i: concurrent_store.save_service(
            new_service(f"name-{i}", service_id="svc-shared")
        )
    )

    oks, errs = _split(results)
    assert len(oks) == 1
    assert len(errs) == WORKERS - 1
    assert all(isinstance(e, ConflictError) for e in errs)

    catalog = concurrent_store.list_services(EMPTY_FILTER, Page())
    assert list(catalog.services) == ["svc-shared"]
    assert catalog.services["svc-shared"] == oks[0]


def test_racing_updates_to_same_version(concurrent_store):
    """Many ``increment()`` updates of the same row: exactly one wins."""
    base = concurrent_store.save_service(new_service("svc", service_id="svc-1"))

    results = race(
        lambda i: concurrent_store.save_service(base.with_desc(f"w{i}").increment())
    )

    oks, errs = _split(results)
    assert len(oks) == 1
    assert all(isinstance(e, ConflictError) for e in errs)

    current = concurrent_store.list_services(EMPTY_FILTER, Page()).services["svc-1"]
    assert current.version == 1
    assert current == oks[0]


def test_racing_versions_with_same_name(concurrent_store):
    """Adding one version name from many threads: exactly one wins."""
    concurrent_store.save_service(new_service("svc", service_id="svc-1"))

    results = race(
        lambda i: concurrent_store.save_version(new_version("svc-1", "1.0.0"))
    )

    oks, errs = _split(results)
    assert len(oks) == 1
    assert all(isinstance(e, ConflictError) for e in errs)
    catalog = concurrent_store.list_services(EMPTY_FILTER, Page())
    assert [v.name for v in catalog.versions["svc-1"]] == ["1.0.0"]


def test_independent_creations_all_succeed(concurrent_store):
    """Writers on different ids never block each other out."""
    results = race(
        lambda i: concurrent_store.save_service(
            new_service(f"name-{i}", service_id=f"svc-{i}")
        )
    )

    oks, errs = _split(results)
    assert not errs
    assert len(oks) == WORKERS
    assert len(concurrent_store.list_services(EMPTY_FILTER, Page())) == WORKERS


def test_mixed_writers_lose_no_acknowledged_write(concurrent_store):
    """Every creation a writer saw succeed is listed afterwards.

    In each round half the writers create distinct services while the other
    half fight over one id, so failing transactions interleave with
    successful ones.
    """
    rounds = 10
    oks: list[Service] = []
    for r in range(rounds):

        def write(i: int, r: int = r) -> Service:
            if i % 2:
                svc = new_service(f"dup-{r}-{i}", service_id=f"dup-{r}")
            else:
                svc = new_service(f"name-{r}-{i}", service_id=f"svc-{r}-{i}")
            return concurrent_store.save_service(svc)

        won, errs = _split(race(write, workers=WORKERS * 2))
        assert all(isinstance(e, ConflictError) for e in errs)
        assert len(errs) == WORKERS - 1
        oks.extend(svc for svc in won if isinstance(svc, Service))

    listed = concurrent_store.list_services(EMPTY_FILTER, Page(limit=1024)).services
    assert len(oks) == rounds * (WORKERS + 1)
    assert sorted(listed) == sorted(svc.id for svc in oks)
    for svc in oks:
        assert listed[svc.id] == svc
