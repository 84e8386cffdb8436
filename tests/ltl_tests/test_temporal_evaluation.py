# tests/ltl_tests/test_temporal_evaluation.py
# This file is part of Vigil - An LTL Runtime Verification
#
# Test suite for next, always and eventually over multi-state traces

from hypothesis import given, strategies as st

from ltl import (
    EventuallyReason,
    VerdictKind,
    always,
    evaluate,
    eventually,
    next_,
    not_,
    now,
    step,
)
from runtime import Registry, extract


def run(formula, registry, states, times=None):
    """Evaluate then step through `states`; return every intermediate verdict."""
    verdicts = []
    verdict = None
    for i, state in enumerate(states):
        t = registry.register(state, None if times is None else times[i])
        verdict = evaluate(formula, t) if verdict is None else step(verdict.residual, t)
        verdicts.append(verdict)
        if verdict.is_conclusive():
            break
    return verdicts


class TestAlways:
    """Unbounded and bounded `always`."""

    def test_counter_exceeding_limit_fails_at_third_state(self, registry, count):
        prop = always(lambda: count.current <= 5, "count <= 5")
        verdicts = run(prop, registry, [{"count": 1}, {"count": 1}, {"count": 6}])

        assert [v.type for v in verdicts] == ["residual", "residual", "false"]
        violation = verdicts[-1].violation
        assert violation.type == "always"
        assert violation.time == registry.time
        assert violation.time.tick == 2
        assert violation.start.tick == 0
        assert violation.leaf().type == "pure"
        assert violation.leaf().description == "count <= 5"

    def test_unbounded_always_stays_open(self, registry, count):
        prop = always(lambda: count.current <= 5)
        verdicts = run(prop, registry, [{"count": i} for i in range(5)])
        assert all(v.is_residual for v in verdicts)
        assert verdicts[-1].residual.type == "always"

    def test_bounded_always_holds_once_window_elapses(self, registry, count):
        prop = always(lambda: count.current <= 5).within(2, "milliseconds")
        verdicts = run(prop, registry, [{"count": 1}] * 4)
        assert [v.type for v in verdicts] == ["residual", "residual", "true"]

    def test_bounded_always_fails_inside_window(self, registry, count):
        prop = always(lambda: count.current <= 5).within(1, "seconds")
        verdicts = run(prop, registry, [{"count": 1}, {"count": 6}], times=[0, 999])
        assert verdicts[-1].is_false

    def test_states_past_the_deadline_are_not_checked(self, registry, count):
        prop = always(lambda: count.current <= 5).within(1, "seconds")
        verdicts = run(prop, registry, [{"count": 1}, {"count": 6}], times=[0, 5000])
        assert verdicts[-1].is_true

    def test_remaining_bound_is_reported(self, registry, count):
        prop = always(lambda: count.current <= 5).within(1, "seconds")
        verdict = run(prop, registry, [{"count": 1}], times=[100])[0]
        assert verdict.residual.deadline_millis == 1100.0
        assert verdict.residual.remaining_millis(registry.time) == 1000.0

    def test_always_next_checks_every_following_state(self, registry, count):
        prop = always(next_(lambda: count.current > 0))
        verdicts = run(prop, registry, [{"count": 1}, {"count": 2}, {"count": 3}, {"count": 0}])

        assert [v.type for v in verdicts] == ["residual", "residual", "residual", "false"]
        violation = verdicts[-1].violation
        assert violation.type == "always"
        assert violation.violation.type == "pure"
        assert violation.time.tick == 3


class TestEventually:
    """Unbounded and bounded `eventually`."""

    def test_goal_reached_after_waiting(self, registry, flag):
        prop = eventually(lambda: not flag.current, "flag cleared")
        verdicts = run(prop, registry, [{"flag": True}, {"flag": False}])
        assert [v.type for v in verdicts] == ["residual", "true"]

    def test_goal_never_reached_stays_open(self, registry, flag):
        prop = eventually(lambda: not flag.current)
        verdicts = run(prop, registry, [{"flag": True}] * 4)
        assert all(v.is_residual for v in verdicts)

    def test_bounded_eventually_times_out(self, registry, flag):
        prop = eventually(lambda: flag.current, "ack").within(1, "seconds")
        verdicts = run(prop, registry, [{"flag": False}] * 3, times=[0, 500, 1000])

        assert [v.type for v in verdicts] == ["residual", "residual", "false"]
        violation = verdicts[-1].violation
        assert violation.type == "eventually"
        assert violation.reason is EventuallyReason.TIMED_OUT
        assert violation.time.millis == 1000.0
        assert violation.deadline_millis == 1000.0

    def test_goal_at_the_deadline_counts(self, registry, flag):
        prop = eventually(lambda: flag.current).within(1, "seconds")
        verdicts = run(prop, registry, [{"flag": False}, {"flag": True}], times=[0, 1000])
        assert verdicts[-1].is_true

    def test_goal_after_the_deadline_does_not_count(self, registry, flag):
        prop = eventually(lambda: flag.current).within(1, "seconds")
        verdicts = run(prop, registry, [{"flag": False}, {"flag": True}], times=[0, 2000])
        assert verdicts[-1].is_false

    def test_eventually_next(self, registry, flag):
        prop = eventually(next_(lambda: flag.current))
        verdicts = run(prop, registry, [{"flag": False}, {"flag": False}, {"flag": True}])
        assert [v.type for v in verdicts] == ["residual", "residual", "true"]


class TestNext:
    """`next` defers its operand to the following state."""

    def test_next_holds(self, registry, count):
        verdicts = run(next_(lambda: count.current == 2), registry, [{"count": 1}, {"count": 2}])
        assert verdicts[0].residual.type == "derived"
        assert verdicts[1].is_true

    def test_next_fails_at_following_state(self, registry, count):
        verdicts = run(next_(lambda: count.current == 2), registry, [{"count": 2}, {"count": 1}])
        assert verdicts[1].violation.type == "pure"
        assert verdicts[1].violation.time.tick == 1

    def test_nested_next(self, registry, count):
        prop = next_(next_(lambda: count.current == 3))
        verdicts = run(prop, registry, [{"count": 1}, {"count": 2}, {"count": 3}])
        assert [v.type for v in verdicts] == ["residual", "residual", "true"]


def _kinds(formula_of, values):
    """Verdict kinds of formula_of(flag_cell) over a fresh trace of flag values."""
    registry = Registry()
    flag = extract(registry, lambda state: state)
    kinds = []
    verdict = None
    for value in values:
        t = registry.register(value)
        verdict = evaluate(formula_of(flag), t) if verdict is None else step(verdict.residual, t)
        kinds.append(verdict.kind)
        if verdict.kind is not VerdictKind.RESIDUAL:
            break
    return kinds


class TestDualities:
    """Standard LTL dualities hold verdict kind by verdict kind."""

    @given(st.lists(st.booleans(), min_size=1, max_size=12))
    def test_next_commutes_with_not(self, values):
        lhs = _kinds(lambda flag: next_(not_(lambda: flag.current)), values)
        rhs = _kinds(lambda flag: not_(next_(lambda: flag.current)), values)
        assert lhs == rhs

    @given(st.lists(st.booleans(), min_size=1, max_size=12))
    def test_always_not_is_not_eventually(self, values):
        lhs = _kinds(lambda flag: always(not_(lambda: flag.current)), values)
        rhs = _kinds(lambda flag: not_(eventually(lambda: flag.current)), values)
        assert lhs == rhs

    @given(st.lists(st.booleans(), min_size=1, max_size=12))
    def test_unbounded_always_fails_exactly_at_first_false(self, values):
        kinds = _kinds(lambda flag: always(lambda: flag.current), values)
        if False in values:
            assert len(kinds) == values.index(False) + 1
            assert kinds[-1] is VerdictKind.FALSE
        else:
            assert all(k is VerdictKind.RESIDUAL for k in kinds)


class TestPendingInstances:
    """Instances left open by earlier states do not pile up."""

    def test_always_eventually_keeps_one_open_instance(self, registry, flag):
        prop = always(eventually(lambda: flag.current))
        verdicts = run(prop, registry, [{"flag": False}] * 200)

        residual = verdicts[-1].residual
        assert residual.type == "always"
        assert len(residual.pending) == 1
        assert residual.pending[0].start.tick == 0

    def test_unacknowledged_requests_share_one_instance(self, registry, flag):
        prop = always(now(True).implies(eventually(lambda: flag.current)))
        verdicts = run(prop, registry, [{"flag": False}] * 100)
        assert len(verdicts[-1].residual.pending) == 1

        verdict = step(verdicts[-1].residual, registry.register({"flag": True}))
        assert verdict.is_residual
        assert verdict.residual.pending == ()

    def test_bounded_instances_stay_distinct_until_they_expire(self, registry, flag):
        prop = always(eventually(lambda: flag.current).within(3, "milliseconds"))
        verdicts = run(prop, registry, [{"flag": False}] * 3)

        # deadlines 3, 4 and 5ms
        assert len(verdicts[-1].residual.pending) == 3
        assert verdicts[-1].is_residual

        verdict = step(verdicts[-1].residual, registry.register({"flag": False}))
        assert verdict.is_false
        assert verdict.violation.violation.start.tick == 0


def _pairs(formula_of, pairs):
    """Verdicts of formula_of(pair_cell) over a fresh trace of (left, right) states."""
    registry = Registry()
    pair = extract(registry, lambda state: state)
    return run(formula_of(pair), registry, pairs)


class TestConjunction:
    """Conjunctions of temporal operators."""

    def test_both_sides_pending_yield_an_and_residual(self, registry, count):
        prop = always(lambda: count.current <= 5).and_(eventually(lambda: count.current == 3))
        verdict = run(prop, registry, [{"count": 1}])[0]
        assert verdict.residual.type == "and"
        assert verdict.residual.left.type == "always"
        assert verdict.residual.right.type == "eventually"

    @given(st.lists(st.tuples(st.booleans(), st.booleans()), min_size=1, max_size=12))
    def test_always_left_and_always_right(self, pairs):
        verdicts = _pairs(
            lambda pair: always(lambda: pair.current[0]).and_(always(lambda: pair.current[1])),
            pairs,
        )
        broken = [i for i, (left, right) in enumerate(pairs) if not (left and right)]

        assert not any(v.is_true for v in verdicts)
        if broken:
            assert len(verdicts) == broken[0] + 1
            violation = verdicts[-1].violation
            assert violation.type == "and"
            assert violation.which == ("right" if pairs[broken[0]][0] else "left")
            assert violation.violation.type == "always"
        else:
            assert verdicts[-1].residual.type == "and"

    @given(st.lists(st.tuples(st.booleans(), st.booleans()), min_size=1, max_size=12))
    def test_eventually_left_and_eventually_right(self, pairs):
        verdicts = _pairs(
            lambda pair: eventually(lambda: pair.current[0]).within(5, "seconds")
            .and_(eventually(lambda: pair.current[1]).within(5, "seconds")),
            pairs,
        )
        seen_left = [i for i, (left, _) in enumerate(pairs) if left]
        seen_right = [i for i, (_, right) in enumerate(pairs) if right]

        assert not any(v.is_false for v in verdicts)
        if seen_left and seen_right:
            assert len(verdicts) == max(seen_left[0], seen_right[0]) + 1
            assert verdicts[-1].is_true
        elif seen_left or seen_right:
            assert verdicts[-1].residual.type == "eventually"
        else:
            assert verdicts[-1].residual.type == "and"
