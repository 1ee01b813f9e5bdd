import pytest

from tracesched.engine import Engine, by_priority, by_queue_order, by_shortest_burst
from tracesched.errors import SimulationError
from tracesched.process import Process


def _loaded(*processes, selector=by_priority):
    engine = Engine(selector=selector)
    engine.load(list(processes))
    return engine


def test_load_admits_clock_zero_arrivals():
    p1 = Process("P1", [3])
    p2 = Process("P2", [3], release_time=2)
    engine = _loaded(p1, p2)
    assert engine.clock_value() == 0
    assert engine.idle()
    assert engine.ready_snapshot() == (p1,)
    assert p1.arrival_time == 0
    assert p2.arrival_time is None


def test_tick_admits_on_release_time():
    p2 = Process("P2", [3], release_time=2)
    engine = _loaded(p2)
    engine.tick()
    assert engine.ready_snapshot() == ()
    engine.tick()
    assert engine.clock_value() == 2
    assert engine.ready_snapshot() == (p2,)
    assert p2.arrival_time == 2


def test_dispatch_if_idle_sets_start_time():
    p1 = Process("P1", [2])
    engine = _loaded(p1)
    assert engine.dispatch_if_idle() is p1
    assert engine.running_process() is p1
    assert p1.start_time == 0
    assert engine.ready_snapshot() == ()
    # Not idle any more.
    assert engine.dispatch_if_idle() is None


def test_running_process_released_when_burst_ends():
    p1 = Process("P1", [2])
    engine = _loaded(p1)
    engine.dispatch_if_idle()
    engine.tick()
    assert engine.running_ticks() == 1
    engine.tick()
    assert p1.complete
    assert engine.idle()
    assert engine.all_complete()
    assert [(s.pid, s.start_time, s.end_time) for s in engine.timeline()] == [("P1", 0, 2)]


def test_io_runs_outside_ready_queue():
    p1 = Process("P1", [1, 2, 1])
    engine = _loaded(p1)
    engine.dispatch_if_idle()
    engine.tick()
    # Burst done, now waiting on IO.
    assert engine.idle()
    assert p1.in_io_phase
    assert engine.ready_snapshot() == ()
    engine.tick()
    assert engine.ready_snapshot() == ()
    engine.tick()
    assert engine.ready_snapshot() == (p1,)
    assert p1.in_cpu_phase
    assert p1.remaining_time() == 1


def test_preempt_running_appends_to_tail():
    p1 = Process("P1", [5])
    p2 = Process("P2", [5])
    engine = _loaded(p1, p2, selector=by_queue_order)
    engine.dispatch_if_idle()
    assert engine.preempt_running() is p1
    assert engine.idle()
    assert engine.ready_snapshot() == (p2, p1)


def test_dispatch_preempt_requires_vacant_slot():
    p1 = Process("P1", [5])
    p2 = Process("P2", [5])
    engine = _loaded(p1, p2)
    engine.dispatch_preempt()
    with pytest.raises(SimulationError):
        engine.dispatch_preempt()


def test_dispatch_preempt_with_explicit_process():
    p1 = Process("P1", [5], priority=1)
    p2 = Process("P2", [5], priority=3)
    engine = _loaded(p1, p2)
    assert engine.dispatch_preempt(p2) is p2
    assert engine.ready_snapshot() == (p1,)


def test_by_priority_ties_break_on_arrival_then_queue_order():
    early = Process("E", [5], priority=2)
    late = Process("L", [5], priority=2, release_time=1)
    engine = _loaded(late, early)
    engine.dispatch_if_idle()
    engine.tick()
    engine.preempt_running()
    # Queue order is L, E but E arrived first.
    assert engine.ready_snapshot() == (late, early)
    assert by_priority(engine.ready_snapshot()) is early

    a = Process("A", [1], priority=1)
    b = Process("B", [1], priority=1)
    engine = _loaded(b, a)
    assert by_priority(engine.ready_snapshot()) is b


def test_by_shortest_burst():
    long = Process("L", [6])
    short = Process("S", [2])
    engine = _loaded(long, short)
    assert by_shortest_burst(engine.ready_snapshot()) is short


def test_all_complete_on_empty_set():
    engine = _loaded()
    assert engine.all_complete()
