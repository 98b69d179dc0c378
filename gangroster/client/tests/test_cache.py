from gangroster.client.cache import QueryCache

FIGHTER = ("fighters", "f1", "detail")
EQUIPMENT = ("fighters", "f1", "equipment")
GANG = ("gangs", "g1", "detail")


def test_get_returns_default_for_missing_key():
    cache = QueryCache()

    assert cache.get(FIGHTER) is None
    assert cache.get(FIGHTER, {}) == {}
    assert FIGHTER not in cache


def test_update_skips_missing_keys():
    cache = QueryCache()
    cache.set(FIGHTER, {"xp": 1})

    cache.update(FIGHTER, lambda f: {**f, "xp": f["xp"] + 1})
    cache.update(GANG, lambda g: {"rating": 0})

    assert cache.get(FIGHTER) == {"xp": 2}
    assert GANG not in cache


def test_invalidate_marks_stale_until_next_set():
    cache = QueryCache()
    cache.set(FIGHTER, {"xp": 1})
    assert cache.is_stale(FIGHTER) is False

    cache.invalidate(FIGHTER)
    assert cache.is_stale(FIGHTER) is True
    assert cache.get(FIGHTER) == {"xp": 1}

    cache.set(FIGHTER, {"xp": 2})
    assert cache.is_stale(FIGHTER) is False


def test_missing_key_is_stale():
    assert QueryCache().is_stale(GANG) is True


def test_invalidate_prefix_only_touches_matching_keys():
    cache = QueryCache()
    cache.set_many({FIGHTER: {}, EQUIPMENT: [], GANG: {}})

    assert cache.invalidate_prefix(("fighters", "f1")) == 2
    assert cache.is_stale(FIGHTER)
    assert cache.is_stale(EQUIPMENT)
    assert not cache.is_stale(GANG)


def test_restore_puts_back_exact_state():
    cache = QueryCache()
    cache.set(FIGHTER, {"xp": 1, "tags": ["a"]})
    cache.set(GANG, {"rating": 100})
    cache.invalidate(GANG)

    snapshot = cache.snapshot([FIGHTER, GANG, EQUIPMENT])

    cache.get(FIGHTER)["tags"].append("b")
    cache.set(GANG, {"rating": 0})
    cache.set(EQUIPMENT, [{"id": "temp-1"}])

    cache.restore(snapshot)

    assert cache.get(FIGHTER) == {"xp": 1, "tags": ["a"]}
    assert cache.get(GANG) == {"rating": 100}
    assert cache.is_stale(GANG) is True
    assert EQUIPMENT not in cache


def test_restore_can_be_repeated():
    cache = QueryCache()
    cache.set(FIGHTER, {"xp": 1})
    snapshot = cache.snapshot([FIGHTER])

    cache.restore(snapshot)
    cache.get(FIGHTER)["xp"] = 99
    cache.restore(snapshot)

    assert cache.get(FIGHTER) == {"xp": 1}
