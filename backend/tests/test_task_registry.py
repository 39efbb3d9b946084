import asyncio

from studybuddy.services.task_registry import get_task, is_running, start_task


def test_task_is_tracked_until_done():
    async def scenario():
        gate = asyncio.Event()

        async def job():
            await gate.wait()
            return "done"

        task = start_task("s-1", job())
        running = is_running("s-1"), get_task("s-1") is task
        gate.set()
        result = await task
        await asyncio.sleep(0)  # let the done callback run
        return running, result, is_running("s-1"), get_task("s-1")

    running, result, still_running, leftover = asyncio.run(scenario())
    assert running == (True, True)
    assert result == "done"
    assert still_running is False
    assert leftover is None


def test_unknown_session_is_not_running():
    assert is_running("never-started") is False
