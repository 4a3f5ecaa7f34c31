"""惰性单次初始化句柄模块."""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from ..exceptions import ConfigurationError

T = TypeVar("T")


class InitState(Enum):
    """初始化状态枚举.

    状态迁移: UNCHECKED -> CHECKING -> READY 或 UNCHECKED -> CHECKING -> FAILED。
    非配置类失败会回到 UNCHECKED，下一次调用重新初始化。

    Attributes:
        UNCHECKED: 尚未初始化，或上一次尝试因非配置错误失败
        CHECKING: 初始化进行中
        READY: 初始化成功
        FAILED: 配置错误导致的失败，后续调用重新抛出同一异常
    """

    UNCHECKED = "unchecked"
    CHECKING = "checking"
    READY = "ready"
    FAILED = "failed"


class Lazy(Generic[T]):
    """惰性单次初始化句柄.

    首次调用 get() 时执行初始化函数并缓存结果。并发的首次访问会阻塞在同一把锁上，
    只执行一次初始化，所有调用方看到同一个结果或同一个异常。

    只有 ConfigurationError 会被永久记住。其他异常（超时、连接失败等）抛给本次
    尝试中的全部调用方后状态回到 UNCHECKED，是否重试由调用方决定。

    Args:
        compute: 初始化函数
        name: 句柄名称，用于日志和 repr

    Examples:
        >>> lazy = Lazy(lambda: 42, name="answer")
        >>> lazy.get()
        42
    """

    def __init__(self, compute: Callable[[], T], name: str = "lazy") -> None:
        self._compute = compute
        self._name = name
        self._lock = threading.Lock()
        self._state = InitState.UNCHECKED
        self._value: T | None = None
        self._error: Exception | None = None
        self._failures = 0

    @property
    def state(self) -> InitState:
        """当前初始化状态."""
        return self._state

    def get(self) -> T:
        """获取（必要时计算）缓存值.

        Returns:
            初始化函数的返回值

        Raises:
            初始化函数抛出的异常；ConfigurationError 之后每次调用都重新抛出
        """
        if self._state is InitState.READY:
            return self._value  # type: ignore[return-value]

        failures_seen = self._failures
        with self._lock:
            if self._state is InitState.READY:
                return self._value  # type: ignore[return-value]
            if self._state is InitState.FAILED:
                raise self._error  # type: ignore[misc]
            # 等待锁期间的那次尝试失败了，与发起方看到同一个异常
            if self._failures != failures_seen and self._error is not None:
                raise self._error

            self._state = InitState.CHECKING
            try:
                value = self._compute()
            except ConfigurationError as e:
                self._error = e
                self._state = InitState.FAILED
                raise
            except Exception as e:
                self._error = e
                self._failures += 1
                self._state = InitState.UNCHECKED
                raise
            self._value = value
            self._error = None
            self._state = InitState.READY
            return value

    def is_ready(self) -> bool:
        return self._state is InitState.READY

    def __repr__(self) -> str:
        return f"Lazy({self._name}, state={self._state.value})"
