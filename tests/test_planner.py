from __future__ import annotations

import random
from itertools import permutations

import pytest

from conftest import make_entry
from wordhunt.core.models import Entry, RoundPlan
from wordhunt.core.planner import distinct_entries, plan_round, shuffled_slots
from wordhunt.exceptions import InsufficientPoolError, PoolLoadError


@pytest.mark.parametrize("seed", range(20))
def test_target_sequence_is_a_permutation(pool, seed) -> None:
    plan = plan_round(pool, rng=random.Random(seed))
    assert plan.round_size == 16
    assert sorted(plan.target_sequence) == list(range(16))


@pytest.mark.parametrize("seed", range(20))
def test_assignment_has_distinct_words_from_pool(pool, seed) -> None:
    plan = plan_round(pool, rng=random.Random(seed))
    words = [entry.word for entry in plan.assignment]
    assert len(set(words)) == 16
    assert set(plan.assignment) <= set(pool)


def test_insufficient_pool_raises() -> None:
    small = [make_entry(f"w{i}") for i in range(10)]
    with pytest.raises(InsufficientPoolError) as info:
        plan_round(small, 16, rng=random.Random(1))
    assert info.value.available == 10
    assert info.value.required == 16
    assert isinstance(info.value, PoolLoadError)


def test_duplicate_words_do_not_count_towards_pool_size() -> None:
    entries = [make_entry(f"w{i}") for i in range(15)] + [make_entry("w0"), make_entry(" w1 ")]
    with pytest.raises(InsufficientPoolError):
        plan_round(entries, 16, rng=random.Random(3))


def test_distinct_entries_keeps_first_occurrence() -> None:
    first = make_entry("cat")
    second = Entry(word="cat", image="other.png", audio="other.mp3")
    assert distinct_entries([first, make_entry("dog"), second]) == [first, make_entry("dog")]


@pytest.mark.parametrize("seed", range(20))
def test_repeated_words_never_reach_the_board(pool, seed) -> None:
    repeats = [make_entry("cat"), Entry(word="apple", image="x", audio="y"), make_entry(" dog ")]
    plan = plan_round(pool + repeats, rng=random.Random(seed))
    words = [entry.word.strip() for entry in plan.assignment]
    assert len(set(words)) == 16
    assert all(entry in pool for entry in plan.assignment)
    assert not any(entry.image == "x" or entry.word == " dog " for entry in plan.assignment)


def test_exact_pool_uses_every_entry(pool) -> None:
    plan = plan_round(pool[:16], rng=random.Random(11))
    assert set(plan.assignment) == set(pool[:16])


def test_round_size_must_be_positive(pool) -> None:
    with pytest.raises(ValueError):
        plan_round(pool, 0)


def test_smaller_round_size(pool) -> None:
    plan = plan_round(pool, 4, rng=random.Random(5))
    assert plan.round_size == 4
    assert sorted(plan.target_sequence) == [0, 1, 2, 3]


def test_same_seed_reproduces_plan(pool) -> None:
    first = plan_round(pool, rng=random.Random(42))
    second = plan_round(pool, rng=random.Random(42))
    assert first == second


def test_first_target_is_not_tied_to_slot_zero(pool) -> None:
    firsts = {plan_round(pool, rng=random.Random(seed)).target_sequence[0] for seed in range(60)}
    assert len(firsts) > 1


def test_shuffled_slots_reaches_every_permutation() -> None:
    rng = random.Random(7)
    seen = {tuple(shuffled_slots(3, rng)) for _ in range(400)}
    assert seen == set(permutations(range(3)))


def test_round_plan_rejects_non_permutation(pool) -> None:
    with pytest.raises(ValueError):
        RoundPlan(assignment=tuple(pool[:3]), target_sequence=(0, 0, 1))
