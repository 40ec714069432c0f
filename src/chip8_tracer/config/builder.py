import logging
from typing import Optional, Tuple
from chip8_tracer.common.errors import ConfigurationError
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import MEMORY_SIZE
from chip8_tracer.arch.chip8.timers import TimerProcess
from chip8_tracer.loader.loader import RomLoader
from .models import SystemConfig

logger = logging.getLogger(__name__)

SUPPORTED_ARCHITECTURES = ("CHIP8",)

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、CPU、タイマーを生成・接続し、プログラムをロードします。
class SystemBuilder:
    def build_system(self, config: SystemConfig, program: Optional[bytes] = None) -> Tuple[Chip8Cpu, Bus, TimerProcess]:
        """
        programが与えられればそれを、なければconfig.romのファイルをロードします。
        どちらもなければフォントのみをロードした状態で返します。
        """
        self.validate(config)

        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

        cpu = Chip8Cpu(bus, seed=config.seed)
        timers = TimerProcess(cpu)

        loader = RomLoader()
        if program is not None:
            loader.load(bus, program)
        elif config.rom:
            loader.load_file(bus, config.rom)
        else:
            loader.load(bus, b"")

        return cpu, bus, timers

    # @intent:responsibility 構成値の妥当性を検証します。
    def validate(self, config: SystemConfig) -> None:
        if config.architecture not in SUPPORTED_ARCHITECTURES:
            raise ConfigurationError(f"Unsupported architecture: {config.architecture}")
        if config.cpu_hz <= 0:
            raise ConfigurationError(f"cpu_hz must be positive, got {config.cpu_hz}")
        if config.timer_hz <= 0:
            raise ConfigurationError(f"timer_hz must be positive, got {config.timer_hz}")
        if config.display.scale <= 0:
            raise ConfigurationError(f"display.scale must be positive, got {config.display.scale}")
        if config.timer_hz > config.cpu_hz:
            logger.warning("timer_hz (%d) exceeds cpu_hz (%d)", config.timer_hz, config.cpu_hz)
