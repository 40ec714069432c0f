# chip8_tracer/runtime/session.py
"""
セッション駆動モジュール。

step()とtick()をそれぞれ独立した周期で呼び出し、エミュレーションセッションを進めます。
致命的な境界エラーが発生した場合はセッションを停止し、エラーを保持します。
"""
import logging
import threading
import time
from typing import Callable, List, Optional

from chip8_tracer.common.errors import BoundsError
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.timers import TimerProcess, DEFAULT_TIMER_HZ
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig

logger = logging.getLogger(__name__)

DEFAULT_CPU_HZ = 500

# @intent:responsibility CPUとタイマーを2本のデーモンスレッドから周期実行します。
# @intent:rationale 共有状態へのアクセスはCPUのロックで直列化されるため、このクラスは周期の管理のみを行います。
class Session:
    """
    1つのエミュレーションセッション。start()で開始し、stop()で終了します。
    """
    def __init__(self, cpu: Chip8Cpu, timers: TimerProcess,
                 cpu_hz: int = DEFAULT_CPU_HZ, timer_hz: int = DEFAULT_TIMER_HZ):
        if cpu_hz <= 0 or timer_hz <= 0:
            raise ValueError("cpu_hz and timer_hz must be positive.")
        self._cpu = cpu
        self._timers = timers
        self._cpu_hz = cpu_hz
        self._timer_hz = timer_hz
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        self._last_error: Optional[BoundsError] = None

    @property
    def is_running(self) -> bool:
        return any(t.is_alive() for t in self._threads) and not self._stop_event.is_set()

    @property
    def last_error(self) -> Optional[BoundsError]:
        return self._last_error

    # @intent:responsibility CPUスレッドとタイマースレッドを開始します。
    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._last_error = None
        self._threads = [
            threading.Thread(target=self._loop, args=(self._step_once, self._cpu_hz),
                             name="chip8-cpu", daemon=True),
            threading.Thread(target=self._loop, args=(self._timers.tick, self._timer_hz),
                             name="chip8-timers", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logger.info("Session started (cpu %d Hz, timers %d Hz)", self._cpu_hz, self._timer_hz)

    # @intent:responsibility セッションを停止し、スレッドの終了を待ちます。
    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._stop_event.set()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join(timeout)

    # @intent:responsibility 指定回数のstep()を同期的に実行し、周波数比に従ってtick()を挟みます。
    # @intent:return 実際に実行したstep()の回数。境界エラーで停止した場合はそこまでの回数です。
    def run_for(self, steps: int) -> int:
        # timer_hz/cpu_hz の比を整数で累積する
        pending = 0
        for executed in range(steps):
            if not self._step_once():
                return executed
            pending += self._timer_hz
            while pending >= self._cpu_hz:
                self._timers.tick()
                pending -= self._cpu_hz
        return steps

    def _step_once(self) -> bool:
        try:
            self._cpu.step()
        except BoundsError as e:
            self._last_error = e
            self._stop_event.set()
            logger.error("Session halted at PC %#05x: %s", self._cpu.get_state().pc, e)
            return False
        return True

    def _loop(self, action: Callable[[], object], hz: int) -> None:
        period = 1.0 / hz
        next_time = time.perf_counter()
        while not self._stop_event.is_set():
            if action() is False:
                return
            next_time += period
            delay = next_time - time.perf_counter()
            if delay > 0:
                self._stop_event.wait(delay)
            else:
                # 遅れを取り戻そうとして連続実行しないよう、基準時刻を現在に合わせる
                next_time = time.perf_counter()


# @intent:responsibility 構成からシステムを構築し、画面なしで指定回数のstep()を実行します。
# @intent:return 実行後のSession。境界エラーで停止した場合はlast_errorに保持されます。
def run_headless(config: SystemConfig, steps: int) -> Session:
    cpu, _, timers = SystemBuilder().build_system(config)
    session = Session(cpu, timers, config.cpu_hz, config.timer_hz)
    executed = session.run_for(steps)
    logger.info("Headless run executed %d/%d steps, %d timer ticks", executed, steps, timers.ticks)
    return session
