# src/chip8_tracer/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
コマンドライン引数を解釈し、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_tracer.common.errors import ConfigurationError
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.runtime.session import run_headless
from .main_window import MainWindow

# @intent:responsibility コマンドライン引数の定義を返します。
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 interpreter with a PySide6 front end.")
    parser.add_argument("rom", nargs="?", help="raw CHIP-8 program image to load at 0x200")
    parser.add_argument("--config", help="YAML system configuration file")
    parser.add_argument("--cpu-hz", type=int, help="instruction rate (overrides config)")
    parser.add_argument("--seed", type=int, help="seed for the RND instruction")
    parser.add_argument("--headless", type=int, metavar="STEPS",
                        help="run STEPS instructions without a window and exit")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    return parser

# @intent:responsibility 設定ファイルとコマンドライン引数から最終的な構成を組み立てます。
def resolve_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.rom:
        config.rom = args.rom
    if args.cpu_hz is not None:
        config.cpu_hz = args.cpu_hz
    if args.seed is not None:
        config.seed = args.seed
    return config

def main(argv: Optional[List[str]] = None):
    """
    アプリケーションのメイン関数。
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = resolve_config(args)
        if args.headless is not None:
            session = run_headless(config, args.headless)
            sys.exit(1 if session.last_error else 0)
        app = QApplication(sys.argv[:1])
        main_win = MainWindow(config)
    except (OSError, ConfigurationError) as e:
        logging.getLogger(__name__).error("Failed to start: %s", e)
        sys.exit(2)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
