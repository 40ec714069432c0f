# chip8_tracer/loader/loader.py
"""
プログラムローダーモジュール。

組み込みフォントを0x000から、生のプログラムイメージ（ヘッダなし）を0x200から
バスへ書き込みます。書き込みはBus.load経由で行い、実行時のバスアクティビティには記録しません。
"""
import logging
from pathlib import Path
from typing import Union

from chip8_tracer.common.errors import ProgramTooLargeError
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import MEMORY_SIZE, PROGRAM_START, FONT_START
from chip8_tracer.loader.font import FONT_SET

logger = logging.getLogger(__name__)

# @intent:constant 0x200以降にロード可能なプログラムの最大バイト数。
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

class RomLoader:
    """
    CHIP-8のフォントとプログラムイメージをバスにロードするローダー。
    """
    # @intent:responsibility フォントとプログラムイメージをメモリに書き込みます。
    # @intent:pre-condition プログラムイメージは0x200から0xFFFまでに収まる必要があります。
    def load(self, bus: Bus, program: bytes) -> None:
        program = bytes(program)
        # 何も書き込む前にサイズを検証する
        if len(program) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)

        for offset, value in enumerate(FONT_SET):
            bus.load(FONT_START + offset, value)
        for offset, value in enumerate(program):
            bus.load(PROGRAM_START + offset, value)

        logger.info("Loaded %d byte program at %#05x", len(program), PROGRAM_START)

    # @intent:responsibility ROMファイルの生バイト列を読み込み、ロードします。
    def load_file(self, bus: Bus, file_path: Union[str, Path]) -> int:
        """
        ファイルを読み込んでロードし、プログラムのバイト数を返します。
        """
        with open(file_path, 'rb') as f:
            program = f.read()
        self.load(bus, program)
        return len(program)
