from __future__ import annotations

import asyncio
import json

from taskkit.ai import AISettings, CacheService, TaskMetadata, TemplateDraft, build_families
from taskkit.ai.runtime import LEGACY_SCOPE, SNAPSHOT_VERSION, PersistencePolicy, migrate_snapshot

POLICY = PersistencePolicy(debounce_s=0.01)


def run_async(coro):
    return asyncio.run(coro)


def _service(store, clock, **settings) -> CacheService:
    return CacheService(
        families=build_families(AISettings(**settings)),
        store=store,
        persistence_policy=POLICY,
        clock=clock,
    )


def _populate(service: CacheService) -> None:
    service.cache("motivation").set("s:motivation:3", "Keep going!", ttl_s=180)
    service.cache("refine").set(
        "s:refine:pay rent",
        TaskMetadata(category="personal", tags=["bills"], is_urgent=True, extracted_time="EOD"),
        ttl_s=3600,
    )
    service.cache("template").set(
        "s:template:grocery trip",
        TemplateDraft(name="Cart Crusher", items=["Milk"], category="personal", tags=["food"]),
        ttl_s=3600,
    )
    service.cache("breakdown").set("s:breakdown:move house", ["Pack", "Drive"], ttl_s=3600)


def test_snapshot_round_trip_restores_live_entries(harness, clock):
    async def scenario() -> None:
        first = _service(harness.store, clock)
        await first.persistence.ensure_loaded()
        _populate(first)
        first.cache("motivation").set("s:motivation:9", "about to expire", ttl_s=1)
        first.persistence.schedule()
        await first.persistence.flush()

        clock.advance(2)
        restarted = _service(harness.store, clock)
        await restarted.persistence.ensure_loaded()

        assert restarted.cache("motivation").get("s:motivation:3") == "Keep going!"
        assert restarted.cache("motivation").get("s:motivation:9") is None
        meta = restarted.cache("refine").get("s:refine:pay rent")
        assert meta == TaskMetadata(
            category="personal", tags=["bills"], is_urgent=True, extracted_time="EOD"
        )
        assert restarted.cache("template").get("s:template:grocery trip").name == "Cart Crusher"
        assert restarted.cache("breakdown").get("s:breakdown:move house") == ["Pack", "Drive"]

    run_async(scenario())


def test_expired_entries_in_snapshot_are_not_restored(harness, clock):
    async def scenario() -> None:
        first = _service(harness.store, clock)
        await first.persistence.ensure_loaded()
        first.cache("breakdown").set("s:breakdown:a", ["x"], ttl_s=10)
        first.persistence.schedule()
        await first.persistence.flush()

        clock.advance(11)
        restarted = _service(harness.store, clock)
        await restarted.persistence.ensure_loaded()
        assert len(restarted.cache("breakdown")) == 0

    run_async(scenario())


def test_burst_of_schedules_collapses_into_one_write(harness, clock):
    async def scenario() -> None:
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        for index in range(5):
            service.cache("template").set(
                f"s:template:{index}", TemplateDraft(name=str(index)), ttl_s=60
            )
            service.persistence.schedule()
            await asyncio.sleep(0)

        await asyncio.sleep(0.1)
        assert harness.store.writes == [POLICY.cache_key]
        blob = json.loads(harness.store.rows[POLICY.cache_key])
        assert blob["version"] == SNAPSHOT_VERSION
        assert len(blob["families"]["template"]) == 5

    run_async(scenario())


def test_read_failure_is_swallowed(harness, clock):
    async def scenario() -> None:
        harness.store.fail_reads = True
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        assert service.persistence.loaded
        service.cache("motivation").set("k", "v", ttl_s=60)
        assert service.cache("motivation").get("k") == "v"

    run_async(scenario())


def test_corrupt_snapshot_is_ignored(harness, clock):
    async def scenario() -> None:
        harness.store.rows[POLICY.cache_key] = "{not json"
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        assert all(len(cache) == 0 for cache in service.caches.values())

    run_async(scenario())


def test_write_failure_is_swallowed(harness, clock):
    async def scenario() -> None:
        harness.store.fail_writes = True
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        service.cache("motivation").set("k", "v", ttl_s=60)
        service.persistence.schedule()
        await service.persistence.flush()
        assert service.cache("motivation").get("k") == "v"
        assert not service.persistence.dirty

    run_async(scenario())


def test_malformed_rows_are_dropped_individually(harness, clock):
    async def scenario() -> None:
        harness.store.rows[POLICY.cache_key] = json.dumps(
            {
                "version": SNAPSHOT_VERSION,
                "families": {
                    "breakdown": [
                        ["s:breakdown:ok", ["a"], clock() + 60],
                        ["s:breakdown:bad", {"not": "a list"}, clock() + 60],
                        ["too", "short"],
                    ],
                    "unknown": [["x", "y", clock() + 60]],
                },
            }
        )
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        assert service.cache("breakdown").get("s:breakdown:ok") == ["a"]
        assert len(service.cache("breakdown")) == 1

    run_async(scenario())


def test_capacity_is_applied_on_load_dropping_oldest(harness, clock):
    async def scenario() -> None:
        rows = [[f"s:breakdown:{i}", [str(i)], clock() + 60] for i in range(6)]
        harness.store.rows[POLICY.cache_key] = json.dumps(
            {"version": SNAPSHOT_VERSION, "families": {"breakdown": rows}}
        )
        service = _service(harness.store, clock, breakdown_capacity=4)
        await service.persistence.ensure_loaded()

        cache = service.cache("breakdown")
        assert len(cache) == 4
        assert "s:breakdown:0" not in cache
        assert "s:breakdown:1" not in cache
        assert cache.get("s:breakdown:5") == ["5"]

    run_async(scenario())


def test_legacy_snapshot_is_migrated_under_legacy_scope(harness, clock):
    async def scenario() -> None:
        expires_ms = (clock() + 600) * 1000
        harness.store.rows[POLICY.legacy_cache_key] = json.dumps(
            {
                "version": 1,
                "caches": {
                    "breakdown": {
                        "breakdown:move house": {"value": ["Pack"], "expiresAt": expires_ms}
                    },
                    "motivation": {"3": {"value": "Go!", "expiresAt": expires_ms}},
                },
            }
        )
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()

        assert service.cache("breakdown").get(f"{LEGACY_SCOPE}:breakdown:move house") == ["Pack"]
        assert service.cache("motivation").get(f"{LEGACY_SCOPE}:motivation:3") == "Go!"
        assert POLICY.legacy_cache_key not in harness.store.rows
        migrated = json.loads(harness.store.rows[POLICY.cache_key])
        assert migrated["version"] == SNAPSHOT_VERSION

    run_async(scenario())


def test_legacy_snapshot_is_kept_when_rewrite_fails(harness, clock):
    async def scenario() -> None:
        expires_ms = (clock() + 600) * 1000
        legacy = json.dumps(
            {
                "version": 1,
                "caches": {"motivation": {"3": {"value": "Go!", "expiresAt": expires_ms}}},
            }
        )
        harness.store.rows[POLICY.legacy_cache_key] = legacy
        harness.store.fail_writes = True
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()

        assert service.cache("motivation").get(f"{LEGACY_SCOPE}:motivation:3") == "Go!"
        assert harness.store.rows[POLICY.legacy_cache_key] == legacy
        assert POLICY.cache_key not in harness.store.rows

    run_async(scenario())


def test_unknown_versions_are_rejected():
    assert migrate_snapshot({"version": 99, "families": {}}) is None
    assert migrate_snapshot({"version": 0}) is None
    assert migrate_snapshot({"families": {}}) is None


def test_load_runs_once_for_concurrent_callers(harness, clock):
    async def scenario() -> None:
        service = _service(harness.store, clock)
        await asyncio.gather(*(service.persistence.ensure_loaded() for _ in range(3)))
        assert service.persistence.loaded
        assert harness.store.reads == [
            POLICY.cooldown_key,
            POLICY.cache_key,
            POLICY.legacy_cache_key,
        ]

    run_async(scenario())


def test_cooldown_survives_restart(harness, clock):
    async def scenario() -> None:
        first = _service(harness.store, clock)
        await first.persistence.ensure_loaded()
        until = first.breaker.trip()
        await first.persistence.save_cooldown(until)

        clock.advance(60)
        restarted = _service(harness.store, clock)
        await restarted.persistence.ensure_loaded()
        assert restarted.breaker.active
        assert restarted.breaker.cooldown_until_s == until

    run_async(scenario())


def test_clear_removes_stored_snapshot(harness, clock):
    async def scenario() -> None:
        service = _service(harness.store, clock)
        await service.persistence.ensure_loaded()
        _populate(service)
        service.persistence.schedule()
        await service.persistence.flush()
        assert POLICY.cache_key in harness.store.rows

        await service.clear()
        assert POLICY.cache_key not in harness.store.rows
        assert all(len(cache) == 0 for cache in service.caches.values())

    run_async(scenario())
