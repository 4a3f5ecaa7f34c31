"""Lazy 单次初始化句柄单元测试."""

import threading
import time
import unittest

from elastictrace.core import InitState, Lazy
from elastictrace.exceptions import ConfigurationError


class TestLazy(unittest.TestCase):
    """Lazy 类单元测试."""

    def test_initial_state(self):
        """测试初始状态为 UNCHECKED."""
        lazy = Lazy(lambda: 1)
        self.assertEqual(lazy.state, InitState.UNCHECKED)
        self.assertFalse(lazy.is_ready())

    def test_get_memoizes_value(self):
        """测试只计算一次."""
        calls = []

        def compute():
            calls.append(1)
            return "value"

        lazy = Lazy(compute, name="memo")
        self.assertEqual(lazy.get(), "value")
        self.assertEqual(lazy.get(), "value")
        self.assertEqual(len(calls), 1)
        self.assertEqual(lazy.state, InitState.READY)

    def test_configuration_failure_is_memoized(self):
        """测试配置错误后每次都重新抛出同一异常，且不再重新计算."""
        calls = []
        error = ConfigurationError("boom")

        def compute():
            calls.append(1)
            raise error

        lazy = Lazy(compute)
        with self.assertRaises(ConfigurationError) as first:
            lazy.get()
        with self.assertRaises(ConfigurationError) as second:
            lazy.get()

        self.assertIs(first.exception, error)
        self.assertIs(second.exception, error)
        self.assertEqual(len(calls), 1)
        self.assertEqual(lazy.state, InitState.FAILED)

    def test_transient_failure_is_retried(self):
        """测试非配置错误不被记住，下一次调用重新计算."""
        results = iter([TimeoutError("timed out"), "value"])

        def compute():
            result = next(results)
            if isinstance(result, Exception):
                raise result
            return result

        lazy = Lazy(compute)
        with self.assertRaises(TimeoutError):
            lazy.get()
        self.assertEqual(lazy.state, InitState.UNCHECKED)

        self.assertEqual(lazy.get(), "value")
        self.assertEqual(lazy.state, InitState.READY)

    def test_waiters_share_transient_failure(self):
        """测试等待同一次尝试的调用方看到同一个异常，不重复计算."""
        started = threading.Event()
        release = threading.Event()
        calls = []
        error = ConnectionError("refused")

        def compute():
            calls.append(1)
            started.set()
            release.wait(timeout=5)
            raise error

        lazy = Lazy(compute)
        errors = []

        def caller():
            try:
                lazy.get()
            except ConnectionError as e:
                errors.append(e)

        first = threading.Thread(target=caller)
        first.start()
        started.wait(timeout=5)
        waiters = [threading.Thread(target=caller) for _ in range(3)]
        for waiter in waiters:
            waiter.start()
        time.sleep(0.1)
        release.set()
        for thread in [first, *waiters]:
            thread.join(timeout=5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(errors), 4)
        self.assertTrue(all(e is error for e in errors))
        self.assertEqual(lazy.state, InitState.UNCHECKED)

    def test_state_is_checking_during_compute(self):
        """测试计算过程中状态为 CHECKING."""
        observed = []
        lazy = None

        def compute():
            observed.append(lazy.state)
            return 1

        lazy = Lazy(compute)
        lazy.get()
        self.assertEqual(observed, [InitState.CHECKING])

    def test_concurrent_first_access_collapses(self):
        """测试并发首次访问只计算一次."""
        started = threading.Event()
        release = threading.Event()
        calls = []

        def compute():
            calls.append(1)
            started.set()
            release.wait(timeout=5)
            return object()

        lazy = Lazy(compute)
        results = []
        threads = [
            threading.Thread(target=lambda: results.append(lazy.get()))
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        started.wait(timeout=5)
        release.set()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 4)
        self.assertTrue(all(result is results[0] for result in results))

    def test_repr(self):
        """测试字符串表示."""
        self.assertEqual(repr(Lazy(lambda: 1, name="x")), "Lazy(x, state=unchecked)")
