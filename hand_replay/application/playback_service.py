"""
回放控制

协作式单任务asyncio驱动循环：任何时刻最多只有一个待执行的回放任务，
单步、跳转、重置和暂停都会先取消它再改变索引。
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .config_service import PlaybackConfig, get_config_service
from ..core.engine.hand_engine import HandEngine
from ..core.snapshot.types import ReplaySnapshot

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
SnapshotCallback = Callable[[ReplaySnapshot], None]


class PlaybackController:
    """
    手牌回放控制器

    每显示一条行动后停留 hold_delay / speed 秒；下一条行动属于新的一条街时，
    先等待发牌动画 reveal_delay / speed，再停顿 absorb_delay / speed，然后显示该行动。

    Examples:
        >>> controller = PlaybackController(engine, on_snapshot=render)
        >>> controller.play()          # 需要在运行中的事件循环里调用
        >>> await controller.wait_idle()
    """

    def __init__(self, engine: HandEngine, config: Optional[PlaybackConfig] = None,
                 sleep: Optional[SleepFunc] = None,
                 on_snapshot: Optional[SnapshotCallback] = None,
                 on_complete: Optional[Callable[[], None]] = None):
        self._engine = engine
        self._config = config or get_config_service().get_playback_config().data
        self._sleep = sleep or asyncio.sleep
        self._on_snapshot = on_snapshot
        self._on_complete = on_complete
        self._index = -1
        self._speed = self._config.default_speed
        self._is_playing = False
        self._task: Optional[asyncio.Task] = None

    @property
    def index(self) -> int:
        return self._index

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def total_actions(self) -> int:
        return self._engine.total_actions

    @property
    def is_at_end(self) -> bool:
        return self._index >= self.total_actions - 1

    @property
    def snapshot(self) -> ReplaySnapshot:
        return self._engine.snapshot(self._index)

    def play(self) -> None:
        """开始自动回放；已在末尾时从只显示盲注的位置重新开始"""
        if self.total_actions == 0:
            return
        if self.is_at_end:
            self._set_index(-1)
        self._is_playing = True
        self._cancel_pending()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def pause(self) -> None:
        self._is_playing = False
        self._cancel_pending()

    def toggle(self) -> None:
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def step_forward(self) -> None:
        self.pause()
        self._set_index(min(self._index + 1, self.total_actions - 1))

    def step_back(self) -> None:
        self.pause()
        self._set_index(max(self._index - 1, -1))

    def jump_to(self, index: int) -> None:
        self.pause()
        self._set_index(max(-1, min(index, self.total_actions - 1)))

    def reset(self) -> None:
        self.pause()
        self._set_index(-1)

    def set_speed(self, speed: float) -> None:
        """
        设置回放速度，下一次等待开始生效

        Raises:
            ValueError: 速度不在允许范围内时
        """
        if speed not in self._config.allowed_speeds:
            raise ValueError(f"回放速度必须是 {self._config.allowed_speeds} 之一，实际: {speed}")
        self._speed = speed

    async def wait_idle(self) -> None:
        """等待当前回放任务结束（正常结束或被取消）"""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _set_index(self, index: int) -> None:
        self._index = index
        if self._on_snapshot is not None:
            self._on_snapshot(self.snapshot)

    def _next_starts_new_street(self) -> bool:
        actions = self._engine.history.voluntary_actions
        next_index = self._index + 1
        if next_index >= len(actions):
            return False
        current_street = actions[self._index].street if self._index >= 0 else None
        return current_street is not None and actions[next_index].street != current_street

    async def _run(self) -> None:
        while self._is_playing and not self.is_at_end:
            await self._sleep(self._config.hold_delay / self._speed)
            if self._next_starts_new_street():
                await self._sleep(self._config.reveal_delay / self._speed)
                await self._sleep(self._config.absorb_delay / self._speed)
            self._set_index(self._index + 1)

        if self.is_at_end:
            self._is_playing = False
            logger.debug("回放结束，共 %d 条行动", self.total_actions)
            if self._on_complete is not None:
                self._on_complete()
