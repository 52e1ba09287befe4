from __future__ import annotations

import asyncio

from conftest import make_entry
from wordhunt.core.models import Accepted, Entry, Ignored, Rejected
from wordhunt.features.session.playback import (
    AFFIRM,
    PRONOUNCE,
    REJECT,
    Cue,
    CuePlan,
    PlaybackConfig,
    PlaybackSequencer,
    cue_plan,
)

CAT = make_entry("cat")


def test_accepted_plays_affirm_then_pronunciation() -> None:
    outcome = Accepted(slot=3, reveal_feedback="cat", progress=1, round_complete=False, next_slot=5)
    plan = cue_plan(outcome, CAT)
    assert plan.cues == (Cue(AFFIRM, "audio/ding.mp3"), Cue(PRONOUNCE, "audio/cat.mp3"))
    assert plan.shake_ms is None
    assert plan.glyph_delay_ms is None


def test_final_accept_carries_glyph_delay() -> None:
    outcome = Accepted(slot=3, reveal_feedback="cat", progress=16, round_complete=True, final_slot=3)
    plan = cue_plan(outcome, CAT, PlaybackConfig(glyph_delay_ms=250))
    assert plan.glyph_delay_ms == 250


def test_accepted_without_audio_only_affirms() -> None:
    entry = Entry(word="cat", image="", audio="")
    outcome = Accepted(slot=0, reveal_feedback="cat", progress=1, round_complete=False, next_slot=1)
    assert [cue.kind for cue in cue_plan(outcome, entry).cues] == [AFFIRM]


def test_rejected_plays_reject_and_shakes() -> None:
    plan = cue_plan(Rejected(slot=1, expected_slot=2), config=PlaybackConfig(reject_src="thud.ogg", shake_ms=420))
    assert plan.cues == (Cue(REJECT, "thud.ogg"),)
    assert plan.shake_ms == 420


def test_ignored_plays_nothing() -> None:
    assert cue_plan(Ignored(slot=1)) == CuePlan()


def test_sequencer_never_overlaps_plans() -> None:
    events: list[str] = []

    async def player(cue: Cue) -> None:
        events.append(f"start {cue.src}")
        await asyncio.sleep(0.01)
        events.append(f"end {cue.src}")

    async def _exercise() -> None:
        sequencer = PlaybackSequencer(player)
        first = CuePlan(cues=(Cue(AFFIRM, "ding"), Cue(PRONOUNCE, "cat")))
        second = CuePlan(cues=(Cue(AFFIRM, "ding2"), Cue(PRONOUNCE, "dog")))
        await asyncio.gather(sequencer.play(first), sequencer.play(second))

    asyncio.run(_exercise())
    assert events == [
        "start ding", "end ding", "start cat", "end cat",
        "start ding2", "end ding2", "start dog", "end dog",
    ]


def test_failed_cue_resolves_immediately() -> None:
    played: list[str] = []

    async def player(cue: Cue) -> None:
        if cue.kind == AFFIRM:
            raise OSError("missing asset")
        played.append(cue.src)

    async def _exercise() -> list[Cue]:
        sequencer = PlaybackSequencer(player)
        return await sequencer.play(CuePlan(cues=(Cue(AFFIRM, "ding"), Cue(PRONOUNCE, "cat"))))

    finished = asyncio.run(_exercise())
    assert played == ["cat"]
    assert [cue.src for cue in finished] == ["ding", "cat"]


def test_advancing_generation_abandons_stale_plans() -> None:
    played: list[str] = []

    async def _exercise() -> tuple[list[Cue], list[Cue]]:
        sequencer: PlaybackSequencer

        async def player(cue: Cue) -> None:
            played.append(cue.src)
            if cue.src == "ding":
                # A reset lands while the affirm cue is still playing.
                sequencer.advance_generation()
            await asyncio.sleep(0)

        sequencer = PlaybackSequencer(player)
        stale = sequencer.play(CuePlan(cues=(Cue(AFFIRM, "ding"), Cue(PRONOUNCE, "cat"))))
        old = await stale
        fresh = await sequencer.play(CuePlan(cues=(Cue(AFFIRM, "ding2"),)))
        return old, fresh

    old, fresh = asyncio.run(_exercise())
    assert [cue.src for cue in old] == ["ding"]
    assert [cue.src for cue in fresh] == ["ding2"]
    assert played == ["ding", "ding2"]


def test_explicit_generation_is_dropped_after_reset() -> None:
    async def player(cue: Cue) -> None:
        raise AssertionError("stale plan should not play")

    async def _exercise() -> list[Cue]:
        sequencer = PlaybackSequencer(player)
        owner = sequencer.generation
        sequencer.advance_generation()
        return await sequencer.play(CuePlan(cues=(Cue(AFFIRM, "ding"),)), generation=owner)

    assert asyncio.run(_exercise()) == []
