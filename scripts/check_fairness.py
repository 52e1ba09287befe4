#!/usr/bin/env python3
"""Report how evenly round planning spreads targets and entries across slots.

Usage:
    python scripts/check_fairness.py --rounds 5000
"""

from __future__ import annotations

import argparse
import random
import statistics
from collections import Counter

from wordhunt.core.planner import plan_round
from wordhunt.data.pool_loader import load_default_pool

SEEDS = (101, 202, 303)


def chi_square(counts: Counter[int], buckets: int, total: int) -> float:
    expected = total / buckets
    return sum((counts.get(bucket, 0) - expected) ** 2 / expected for bucket in range(buckets))


def evaluate(rounds: int, seed: int) -> tuple[float, float]:
    pool = load_default_pool()
    rng = random.Random(seed)
    first_targets: Counter[int] = Counter()
    slot_zero_words: Counter[str] = Counter()
    round_size = 16
    for _ in range(rounds):
        plan = plan_round(pool, round_size, rng=rng)
        first_targets[plan.target_sequence[0]] += 1
        slot_zero_words[plan.assignment[0].word] += 1
    words = sorted({entry.word for entry in pool})
    word_counts = Counter({index: slot_zero_words[word] for index, word in enumerate(words)})
    return chi_square(first_targets, round_size, rounds), chi_square(word_counts, len(words), rounds)


def main() -> None:
    parser = argparse.ArgumentParser(description="Check round planning uniformity.")
    parser.add_argument("--rounds", type=int, default=5000)
    parser.add_argument("--verbose", action="store_true", help="Print per-seed statistics")
    args = parser.parse_args()

    targets: list[float] = []
    entries: list[float] = []
    for seed in SEEDS:
        target_chi, entry_chi = evaluate(args.rounds, seed)
        targets.append(target_chi)
        entries.append(entry_chi)
        if args.verbose:
            print(f"  seed {seed}: first-target χ²={target_chi:.2f} slot-0 entry χ²={entry_chi:.2f}")
    print(f"first target χ² (15 dof): {statistics.fmean(targets):.2f}")
    print(f"slot 0 entry χ²: {statistics.fmean(entries):.2f}")


if __name__ == "__main__":
    main()
