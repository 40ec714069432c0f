# src/chip8_tracer/ui/display_view.py
"""
64x32のモノクロ表示バッファを画面に描画するウィジェット。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QImage, QPainter, QColor
from PySide6.QtCore import Qt, QRect

from chip8_tracer.arch.chip8.state import DISPLAY_WIDTH, DISPLAY_HEIGHT, PIXEL_OFF

# @intent:utility_function 表示バッファ（1画素1バイト）からQImageを生成します。
def frame_to_image(frame: bytes, foreground: QColor, background: QColor) -> QImage:
    image = QImage(DISPLAY_WIDTH, DISPLAY_HEIGHT, QImage.Format_RGB32)
    image.fill(background)
    fg = foreground.rgb()
    for index, pixel in enumerate(frame):
        if pixel != PIXEL_OFF:
            image.setPixel(index % DISPLAY_WIDTH, index // DISPLAY_WIDTH, fg)
    return image

# @intent:responsibility 最後に取得したフレームを最近傍補間で拡大描画します。
class DisplayView(QWidget):
    def __init__(self, scale: int = 8, foreground: str = "#FFFFFF", background: str = "#000000", parent=None):
        super().__init__(parent)
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._image: Optional[QImage] = None
        self.setMinimumSize(DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.set_frame(bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT))

    # @intent:responsibility 表示するフレームを差し替え、再描画を要求します。
    def set_frame(self, frame: bytes) -> None:
        self._image = frame_to_image(frame, self._foreground, self._background)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._image is not None:
            # 縦横比を保ったまま整数倍で拡大する
            scale = max(1, min(self.width() // DISPLAY_WIDTH, self.height() // DISPLAY_HEIGHT))
            w, h = DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale
            target = QRect((self.width() - w) // 2, (self.height() - h) // 2, w, h)
            painter.setRenderHint(QPainter.SmoothPixmapTransform, False)
            painter.drawImage(target, self._image)
        painter.end()
