from dataclasses import dataclass, field
from typing import Dict, Optional

@dataclass
class DisplayConfig:
    scale: int = 8
    foreground: str = "#FFFFFF"
    background: str = "#000000"

@dataclass
class SystemConfig:
    architecture: str = "CHIP8"
    rom: Optional[str] = None
    cpu_hz: int = 500   # step() rate
    timer_hz: int = 60  # tick() rate
    seed: Optional[int] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=dict)  # host key name -> CHIP-8 key
