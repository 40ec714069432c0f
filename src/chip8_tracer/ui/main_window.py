# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
表示、キーパッド、レジスタビューを保持し、2つのQTimerでstep()とtick()を駆動します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox,
)
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from chip8_tracer.common.errors import BoundsError, ConfigurationError
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.config.models import SystemConfig
from .display_view import DisplayView
from .keypad_view import KeypadView
from .keymap import build_keymap, lookup
from .register_view import RegisterView

logger = logging.getLogger(__name__)

# 表示のポーリング間隔（ミリ秒）
FRAME_INTERVAL_MS = 16

# @intent:responsibility アプリケーションのメインウィンドウを定義し、エミュレーションセッションを駆動します。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("CHIP-8 Core Tracer")
        self._config = config or SystemConfig()
        self._keymap = build_keymap(self._config.keymap)
        self._program: Optional[bytes] = None

        self._setup_backend()
        self._create_views()
        self._create_toolbar()
        self._create_menus()
        self._create_timers()

        self._update_ui_state(False)

    # @intent:responsibility 構成からCPU、バス、タイマー処理を生成します。
    def _setup_backend(self, program: Optional[bytes] = None):
        builder = SystemBuilder()
        self.cpu, self.bus, self.timers = builder.build_system(self._config, program)

    def _create_views(self):
        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.keypad_view = KeypadView()
        self.keypad_view.key_pressed.connect(self.cpu.press_key)
        self.keypad_view.key_released.connect(self.cpu.release_key)

        self.status_label = QLabel("Ready")
        self.status_label.setAlignment(Qt.AlignCenter)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(self.display_view, stretch=1)
        layout.addWidget(self.keypad_view)
        layout.addWidget(self.status_label)
        self.setCentralWidget(central)

        status_dock = QDockWidget("Registers", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        status_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self._run)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self._stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset)
        toolbar.addAction(self.reset_action)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")
        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(self.open_action)

    # @intent:responsibility 命令実行用、タイマー用、表示ポーリング用の3つのQTimerを生成します。
    # @intent:rationale 全てGUIスレッド上で実行されるため、step()とtick()は並行しません。
    def _create_timers(self):
        self.cpu_timer = QTimer(self)
        self.cpu_timer.setInterval(max(1, round(1000 / self._config.cpu_hz)))
        self.cpu_timer.timeout.connect(self._on_cpu_timer)

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(max(1, round(1000 / self._config.timer_hz)))
        self.tick_timer.timeout.connect(self.timers.tick)

        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_INTERVAL_MS)
        self.frame_timer.timeout.connect(self._refresh_display)
        self.frame_timer.start()

    def _update_ui_state(self, is_running: bool):
        self.open_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    # @intent:responsibility ROMファイルを読み込み、新しいセッションを構築します。
    def load_rom(self, file_name: str) -> None:
        with open(file_name, 'rb') as f:
            program = f.read()
        self._program = program
        self._rebuild()
        self.status_label.setText(f"Loaded {file_name}")

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except (OSError, ConfigurationError) as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")

    @Slot()
    def _run(self):
        self._update_ui_state(True)
        self.status_label.setText("Running...")
        self.cpu_timer.start()
        self.tick_timer.start()

    @Slot()
    def _stop(self):
        self.cpu_timer.stop()
        self.tick_timer.stop()
        self._update_ui_state(False)
        self.register_view.update_registers()

    @Slot()
    def _step(self):
        if self._execute_step():
            self.register_view.update_registers()
            self._refresh_display()

    @Slot()
    def _reset(self):
        self._rebuild()
        self.status_label.setText("Reset")

    # @intent:responsibility 保持しているプログラムで新しいセッションを構築し、ビューとタイマーを接続し直します。
    def _rebuild(self):
        self._stop()
        self._setup_backend(self._program)
        self.keypad_view.key_pressed.disconnect()
        self.keypad_view.key_released.disconnect()
        self.keypad_view.key_pressed.connect(self.cpu.press_key)
        self.keypad_view.key_released.connect(self.cpu.release_key)
        self.tick_timer.timeout.disconnect()
        self.tick_timer.timeout.connect(self.timers.tick)
        self.register_view.set_cpu(self.cpu)
        self.register_view.update_registers()
        self.display_view.set_frame(bytes(self.cpu.get_state().display))

    @Slot()
    def _on_cpu_timer(self):
        self._execute_step()

    # @intent:responsibility 1命令を実行します。境界エラーの場合はセッションを停止して通知します。
    def _execute_step(self) -> bool:
        try:
            snapshot = self.cpu.step()
        except BoundsError as e:
            self._stop()
            logger.error("Session halted: %s", e)
            self.status_label.setText("Halted")
            QMessageBox.critical(self, "Halted", f"Fatal error: {e}")
            return False
        self.status_label.setToolTip(snapshot.metadata.symbol_info or "")
        return True

    @Slot()
    def _refresh_display(self):
        frame = self.cpu.export_display()
        if frame is not None:
            self.display_view.set_frame(frame)

    # @intent:responsibility ホストキーボードの押下/解放を論理キーに変換してCPUへ渡します。
    def keyPressEvent(self, event: QKeyEvent):
        key = lookup(self._keymap, event.text())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.press_key(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = lookup(self._keymap, event.text())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.release_key(key)

    def closeEvent(self, event: QCloseEvent):
        self.cpu_timer.stop()
        self.tick_timer.stop()
        self.frame_timer.stop()
        event.accept()
