import pytest

from auraflow.application.services import Saga, SagaFailedError, SagaStep


@pytest.mark.asyncio
async def test_runs_steps_in_order_and_collects_results():
    calls = []

    async def first(ctx):
        calls.append("first")
        return 1

    async def second(ctx):
        calls.append("second")
        return ctx["first"] + 1

    context = await Saga("ok", [SagaStep("first", first), SagaStep("second", second)]).run()

    assert calls == ["first", "second"]
    assert context == {"first": 1, "second": 2}


@pytest.mark.asyncio
async def test_compensates_completed_steps_in_reverse():
    calls = []

    def step(name, fail=False):
        async def action(ctx):
            calls.append(f"do:{name}")
            if fail:
                raise ValueError(f"{name} failed")
            return name

        async def compensation(ctx):
            calls.append(f"undo:{name}")

        return SagaStep(name, action, compensation)

    saga = Saga("rollback", [step("a"), step("b"), step("c", fail=True)])

    with pytest.raises(SagaFailedError) as exc_info:
        await saga.run()

    assert calls == ["do:a", "do:b", "do:c", "undo:b", "undo:a"]
    assert exc_info.value.step_name == "c"
    assert isinstance(exc_info.value.cause, ValueError)
    assert exc_info.value.compensated == ["b", "a"]


@pytest.mark.asyncio
async def test_failed_compensation_does_not_stop_the_rest():
    undone = []

    async def ok(ctx):
        return True

    async def broken_undo(ctx):
        raise RuntimeError("cannot undo")

    async def undo_a(ctx):
        undone.append("a")

    async def boom(ctx):
        raise RuntimeError("boom")

    saga = Saga("partial", [
        SagaStep("a", ok, undo_a),
        SagaStep("b", ok, broken_undo),
        SagaStep("c", boom),
    ])

    with pytest.raises(SagaFailedError) as exc_info:
        await saga.run()

    assert undone == ["a"]
    assert exc_info.value.compensated == ["a"]
    assert exc_info.value.context == {"a": True, "b": True}
