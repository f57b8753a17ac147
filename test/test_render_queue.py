"""
Tests for the sequential render queue.
"""

import unittest
import asyncio
import threading
import time
import os
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import RenderError
from common.render_queue import RenderQueue


class TestRenderQueue(unittest.IsolatedAsyncioTestCase):
    """Test ordering and timeout behaviour."""

    async def test_tasks_run_one_after_the_other(self):
        events = []

        def task(name, delay):
            async def render():
                events.append(f"{name}-start")
                await asyncio.sleep(delay)
                events.append(f"{name}-end")
                return name
            return render

        queue = RenderQueue()
        queue.submit("load.json", "histogram", task("histogram", 0.05))
        queue.submit("load.json", "trend", task("trend", 0))

        results = await queue.run()

        self.assertEqual(results, ["histogram", "trend"])
        self.assertEqual(events, ["histogram-start", "histogram-end", "trend-start", "trend-end"])
        self.assertEqual(len(queue), 0)

    async def test_zero_timeout_means_no_timeout(self):
        self.assertIsNone(RenderQueue(0).timeout_seconds)
        self.assertIsNone(RenderQueue(None).timeout_seconds)
        self.assertEqual(RenderQueue(2.5).timeout_seconds, 2.5)

    async def test_slow_render_times_out_after_finishing(self):
        events = []

        async def slow():
            events.append("slow-start")
            await asyncio.sleep(0.3)
            events.append("slow-end")

        async def never():
            events.append("never")

        queue = RenderQueue(timeout_seconds=0.05)
        queue.submit("slow.json", "histogram", slow)
        queue.submit("slow.json", "trend", never)

        with self.assertRaises(RenderError) as ctx:
            await queue.run()

        self.assertEqual(ctx.exception.source, "slow.json")
        self.assertEqual(ctx.exception.chart, "histogram")
        self.assertEqual(events, ["slow-start", "slow-end"])
        self.assertEqual(len(queue), 0)

    async def test_blocking_render_does_not_overlap_next_queue(self):
        lock = threading.Lock()
        active = []
        max_active = []

        def blocking_render(delay):
            with lock:
                active.append(1)
                max_active.append(len(active))
            time.sleep(delay)
            with lock:
                active.pop()
            return delay

        def in_executor(delay):
            async def render():
                loop = asyncio.get_running_loop()
                return await loop.run_in_executor(None, blocking_render, delay)
            return render

        first = RenderQueue(timeout_seconds=0.05)
        first.submit("a-test.json", "histogram", in_executor(0.4))
        with self.assertRaises(RenderError):
            await first.run()

        # The blocking render has ended by the time the error surfaces
        self.assertEqual(active, [])

        second = RenderQueue(timeout_seconds=5)
        second.submit("b-test.json", "histogram", in_executor(0))
        self.assertEqual(await second.run(), [0])
        self.assertEqual(max(max_active), 1)

    async def test_task_errors_propagate(self):
        async def fail():
            raise RenderError("bad.json", "trend", "boom")

        queue = RenderQueue()
        queue.submit("bad.json", "trend", fail)

        with self.assertRaises(RenderError):
            await queue.run()


if __name__ == '__main__':
    unittest.main()
