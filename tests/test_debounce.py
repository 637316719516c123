from color_sandbox.debounce import Debouncer


def test_only_latest_call_runs(clock):
    calls = []
    d = Debouncer(0.2, calls.append, _clock=clock)
    d.trigger(1)
    d.trigger(2)
    assert not d.poll()
    clock.now += 0.25
    assert d.poll()
    assert calls == [2]
    assert not d.pending


def test_retrigger_restarts_delay(clock):
    calls = []
    d = Debouncer(0.2, calls.append, _clock=clock)
    d.trigger("a")
    clock.now += 0.15
    d.trigger("b")
    clock.now += 0.15
    assert not d.poll()
    clock.now += 0.1
    assert d.poll()
    assert calls == ["b"]


def test_flush_and_cancel(clock):
    calls = []
    d = Debouncer(10.0, calls.append, _clock=clock)
    d.trigger("x")
    assert d.flush()
    assert calls == ["x"]
    d.trigger("y")
    d.cancel()
    clock.now += 100
    assert not d.poll()
    assert calls == ["x"]
