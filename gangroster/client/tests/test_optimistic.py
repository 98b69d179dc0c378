from unittest.mock import MagicMock

import pytest

from gangroster.client.cache import QueryCache
from gangroster.client.optimistic import OptimisticMutation, RetryPolicy
from gangroster.client.transport import TransportError
from gangroster.core.errors import ErrorKind
from gangroster.core.results import MutationResult

XP = ("fighters", "f1", "detail")
LOG = ("fighters", "f1", "log")


@pytest.fixture
def cache():
    cache = QueryCache()
    cache.set(XP, {"xp": 5})
    return cache


def add_xp(current, params):
    return {
        XP: {"xp": current[XP]["xp"] + params},
        LOG: ["pending"],
        ("gangs", "g1", "detail"): {"ignored": True},
    }


def make_mutation(cache, send, sleeps=None, **kwargs):
    return OptimisticMutation(
        cache,
        name="update_fighter_xp",
        keys=lambda params: [XP, LOG],
        patch=add_xp,
        send=send,
        sleep=(sleeps.append if sleeps is not None else lambda delay: None),
        **kwargs,
    )


def test_cache_is_patched_before_send(cache):
    seen = {}

    def send(params):
        seen["xp"] = cache.get(XP)["xp"]
        return MutationResult.ok({"xp": 8})

    result = make_mutation(cache, send).execute(3)

    assert result.success is True
    assert seen["xp"] == 8


def test_only_declared_keys_are_patched(cache):
    make_mutation(cache, lambda p: MutationResult.ok()).execute(1)

    assert ("gangs", "g1", "detail") not in cache
    assert cache.get(LOG) == ["pending"]


def test_success_reconciles_with_server_data(cache):
    def reconcile(cache_, params, data):
        cache_.set(XP, {"xp": data["xp"]})
        cache_.remove(LOG)

    result = make_mutation(
        cache, lambda p: MutationResult.ok({"xp": 7}), reconcile=reconcile
    ).execute(3)

    assert result.data == {"xp": 7}
    assert cache.get(XP) == {"xp": 7}
    assert LOG not in cache


def test_domain_failure_rolls_back_without_retry(cache):
    send = MagicMock(
        return_value=MutationResult.failure("Fighter not found", ErrorKind.NOT_FOUND)
    )
    sleeps = []

    result = make_mutation(cache, send, sleeps).execute(3)

    assert result.success is False
    assert result.error_kind == ErrorKind.NOT_FOUND
    assert send.call_count == 1
    assert sleeps == []
    assert cache.get(XP) == {"xp": 5}
    assert LOG not in cache


def test_network_failure_is_retried_with_backoff(cache):
    send = MagicMock(
        side_effect=[
            TransportError("connection reset"),
            TransportError("connection reset"),
            MutationResult.ok({"xp": 8}),
        ]
    )
    sleeps = []

    result = make_mutation(cache, send, sleeps).execute(3)

    assert result.success is True
    assert send.call_count == 3
    assert sleeps == [1.0, 2.0]


def test_retries_exhausted_rolls_back_as_network_failure(cache):
    send = MagicMock(side_effect=TransportError("connection refused"))
    sleeps = []

    result = make_mutation(cache, send, sleeps).execute(3)

    assert result.success is False
    assert result.error_kind == ErrorKind.NETWORK
    assert result.error == "connection refused"
    assert send.call_count == 3
    assert sleeps == [1.0, 2.0]
    assert cache.get(XP) == {"xp": 5}
    assert LOG not in cache


def test_custom_retry_policy(cache):
    send = MagicMock(side_effect=TransportError("timeout"))
    sleeps = []

    make_mutation(cache, send, sleeps, retry_policy=RetryPolicy(retries=0)).execute(1)

    assert send.call_count == 1
    assert sleeps == []


@pytest.mark.parametrize(
    "attempt,expected", [(0, 1.0), (1, 2.0), (2, 4.0), (3, 8.0), (4, 10.0), (9, 10.0)]
)
def test_retry_delay_is_capped(attempt, expected):
    assert RetryPolicy().delay(attempt) == expected


def test_unexpected_send_error_rolls_back(cache):
    send = MagicMock(side_effect=AttributeError("'list' object has no attribute"))
    sleeps = []

    result = make_mutation(cache, send, sleeps).execute(3)

    assert result.success is False
    assert result.error_kind == ErrorKind.STORE_ERROR
    assert result.error.startswith("Failed to update fighter xp")
    assert send.call_count == 1
    assert sleeps == []
    assert cache.get(XP) == {"xp": 5}
    assert LOG not in cache


def test_reconcile_error_rolls_back_and_marks_keys_stale(cache):
    def reconcile(cache_, params, data):
        raise KeyError("fighter")

    result = make_mutation(
        cache, lambda p: MutationResult.ok({}), reconcile=reconcile
    ).execute(3)

    assert result.success is False
    assert result.error_kind == ErrorKind.STORE_ERROR
    assert cache.get(XP) == {"xp": 5}
    assert cache.is_stale(XP)
    assert LOG not in cache


def test_unpatchable_params_are_still_sent(cache):
    seen = {}

    def send(params):
        seen["xp"] = cache.get(XP)["xp"]
        return MutationResult.failure(
            "XP must be a whole number", ErrorKind.VALIDATION
        )

    result = make_mutation(cache, send).execute("3")

    assert result.error_kind == ErrorKind.VALIDATION
    assert seen["xp"] == 5
    assert cache.get(XP) == {"xp": 5}
    assert LOG not in cache
