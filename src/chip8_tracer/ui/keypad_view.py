# src/chip8_tracer/ui/keypad_view.py
"""
16キーの画面上キーパッド。ボタンの押下/解放をシグナルで通知します。
"""
from PySide6.QtWidgets import QWidget, QGridLayout, QPushButton
from PySide6.QtCore import Signal

from chip8_tracer.arch.chip8.state import NUM_KEYS
from .keymap import keypad_position

# @intent:responsibility 4x4のボタンを配置し、論理キー番号付きで押下/解放を通知します。
class KeypadView(QWidget):
    key_pressed = Signal(int)
    key_released = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("""
            QPushButton { background-color: #D97A00; color: #FFFFFF; font-weight: bold; min-height: 40px; }
            QPushButton:pressed { background-color: #FFAA33; }
        """)
        layout = QGridLayout(self)
        layout.setSpacing(4)

        for key in range(NUM_KEYS):
            row, col = keypad_position(key)
            button = QPushButton(f"{key:X}")
            # pressed/released は押したまま外へ出た場合も released が発行される
            button.pressed.connect(lambda k=key: self.key_pressed.emit(k))
            button.released.connect(lambda k=key: self.key_released.emit(k))
            layout.addWidget(button, row, col)
