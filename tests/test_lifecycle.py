"""이 파일은 .py 테스트 모듈로 작업 종류별 수명주기와 대체(supersede) 규칙을 검증합니다."""

import asyncio

from zmctf_client.core.cancellation import run_cancellable
from zmctf_client.core.errors import RequestFailed, TransportError, ValidationError
from zmctf_client.services.lifecycle import ActionKind, LifecycleController, Phase


def test_late_completion_does_not_overwrite_newer_result() -> None:
    async def scenario():
        controller = LifecycleController()
        release_a = asyncio.Event()

        async def slow_ignoring_token(token):
            await release_a.wait()
            return "A"

        async def fast(token):
            return "B"

        task_a = asyncio.create_task(controller.run(ActionKind.ANALYZE, slow_ignoring_token))
        await asyncio.sleep(0)
        outcome_b = await controller.run(ActionKind.ANALYZE, fast)
        release_a.set()
        outcome_a = await task_a
        return controller.state(ActionKind.ANALYZE), outcome_a, outcome_b

    state, outcome_a, outcome_b = asyncio.run(scenario())
    assert outcome_b.phase == Phase.SUCCEEDED
    assert outcome_a.phase == Phase.SUPERSEDED
    assert state.value == "B"
    assert state.phase == Phase.SUCCEEDED
    assert state.busy is False


def test_new_call_cancels_the_previous_token() -> None:
    async def scenario():
        controller = LifecycleController()
        seen = []

        async def waits_for_cancel(token):
            seen.append(token)
            return await run_cancellable(asyncio.Event().wait(), token)

        task_a = asyncio.create_task(controller.run(ActionKind.LOAD_CONFIG, waits_for_cancel))
        await asyncio.sleep(0)

        async def immediate(token):
            return {"config_path": "p"}

        await controller.run(ActionKind.LOAD_CONFIG, immediate)
        return seen[0], await task_a

    token_a, outcome_a = asyncio.run(scenario())
    assert token_a.cancelled
    assert token_a.reason == "superseded"
    assert outcome_a.phase == Phase.SUPERSEDED


def test_failure_keeps_previous_value() -> None:
    async def scenario():
        controller = LifecycleController()

        async def ok(token):
            return "first"

        async def broken(token):
            raise RequestFailed(500, "boom")

        await controller.run(ActionKind.ANALYZE, ok)
        outcome = await controller.run(ActionKind.ANALYZE, broken)
        return controller.state(ActionKind.ANALYZE), outcome

    state, outcome = asyncio.run(scenario())
    assert outcome.phase == Phase.FAILED
    assert state.value == "first"
    assert state.error == "분석 실패: HTTP 500: boom"
    assert state.busy is False


def test_success_clears_previous_error() -> None:
    async def scenario():
        controller = LifecycleController()

        async def unreachable(token):
            raise TransportError("API 연결 실패: refused")

        async def ok(token):
            return "value"

        await controller.run(ActionKind.RELOAD_CONFIG, unreachable)
        failed = controller.state(ActionKind.RELOAD_CONFIG)
        await controller.run(ActionKind.RELOAD_CONFIG, ok)
        return failed, controller.state(ActionKind.RELOAD_CONFIG)

    failed, recovered = asyncio.run(scenario())
    assert "refused" in failed.error
    assert recovered.error is None
    assert recovered.value == "value"


def test_kinds_are_independent() -> None:
    async def scenario():
        controller = LifecycleController()
        release = asyncio.Event()

        async def slow(token):
            await release.wait()
            return "config"

        async def ok(token):
            return "result"

        pending = asyncio.create_task(controller.run(ActionKind.LOAD_CONFIG, slow))
        await asyncio.sleep(0)
        await controller.run(ActionKind.ANALYZE, ok)
        busy_while_other_finished = controller.is_busy(ActionKind.LOAD_CONFIG)
        release.set()
        outcome = await pending
        return busy_while_other_finished, outcome

    busy, outcome = asyncio.run(scenario())
    assert busy is True
    assert outcome.phase == Phase.SUCCEEDED


def test_validation_failure_is_synchronous_and_supersedes() -> None:
    async def scenario():
        controller = LifecycleController()
        release = asyncio.Event()

        async def slow(token):
            await release.wait()
            return "stale"

        pending = asyncio.create_task(controller.run(ActionKind.ANALYZE, slow))
        await asyncio.sleep(0)
        failure = controller.fail(ActionKind.ANALYZE, ValidationError("분석할 내용을 입력하세요."))
        release.set()
        late = await pending
        return failure, late, controller.state(ActionKind.ANALYZE)

    failure, late, state = asyncio.run(scenario())
    assert failure.phase == Phase.FAILED
    assert late.phase == Phase.SUPERSEDED
    assert state.value is None
    assert state.error == "분석 실패: 분석할 내용을 입력하세요."


def test_explicit_cancel_clears_busy_without_error() -> None:
    async def scenario():
        controller = LifecycleController()

        async def waits(token):
            return await run_cancellable(asyncio.Event().wait(), token)

        pending = asyncio.create_task(controller.run(ActionKind.SAVE_CONFIG, waits))
        await asyncio.sleep(0)
        cancelled = controller.cancel(ActionKind.SAVE_CONFIG)
        outcome = await pending
        return cancelled, outcome, controller.state(ActionKind.SAVE_CONFIG)

    cancelled, outcome, state = asyncio.run(scenario())
    assert cancelled is True
    assert outcome.phase == Phase.CANCELLED
    assert state.phase == Phase.CANCELLED
    assert state.busy is False
    assert state.error is None


def test_unexpected_exception_is_recorded() -> None:
    async def scenario():
        controller = LifecycleController()

        async def bug(token):
            raise KeyError("flags")

        outcome = await controller.run(ActionKind.ANALYZE, bug)
        return outcome

    outcome = asyncio.run(scenario())
    assert outcome.phase == Phase.FAILED
    assert outcome.error.startswith("분석 실패: 예상치 못한 오류")


def test_listeners_receive_state_changes() -> None:
    async def scenario():
        controller = LifecycleController()
        events = []
        unsubscribe = controller.subscribe(lambda kind, state: events.append((kind, state.phase)))

        async def ok(token):
            return 1

        await controller.run(ActionKind.HEALTH, ok)
        unsubscribe()
        await controller.run(ActionKind.HEALTH, ok)
        return events

    events = asyncio.run(scenario())
    assert events == [(ActionKind.HEALTH, Phase.PENDING), (ActionKind.HEALTH, Phase.SUCCEEDED)]
