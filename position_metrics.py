"""Conversión entre píxeles y caracteres para el campo de resultado."""

import logging
import math
import threading

logger = logging.getLogger(__name__)

MAX_WIDTH = 100  # caracteres si todavía no se conoce el ancho


def round_half_up(value: float) -> int:
    """Redondeo a la mitad hacia arriba, independiente del redondeo bancario."""
    return math.floor(value + 0.5)


class CharacterMetrics:
    """Ancho disponible y ancho de carácter, protegidos por un único candado.

    Se escribe desde la medición del layout y se lee desde el formateo, que
    puede ejecutarse en otro hilo.
    """

    def __init__(
        self,
        display_width_pixels: int = -1,
        reserved_ellipsis_pixels: int = 0,
        char_width_pixels: float = 1.0,
    ):
        self._lock = threading.Lock()
        self._display_width = -1
        self._reserved_ellipsis = 0
        self._char_width = 1.0
        self.update(display_width_pixels, char_width_pixels, reserved_ellipsis_pixels)

    def update(
        self,
        display_width_pixels: int,
        char_width_pixels: float,
        reserved_ellipsis_pixels: int | None = None,
    ):
        if char_width_pixels <= 0:
            raise ValueError("El ancho de carácter debe ser positivo")

        with self._lock:
            self._display_width = int(display_width_pixels)
            if reserved_ellipsis_pixels is not None:
                self._reserved_ellipsis = int(reserved_ellipsis_pixels)
            self._char_width = float(char_width_pixels)

    def snapshot(self) -> tuple[int, float]:
        """Devuelve (ancho útil sin puntos suspensivos, ancho de carácter)."""
        with self._lock:
            return self._display_width - self._reserved_ellipsis, self._char_width

    @property
    def char_width(self) -> float:
        with self._lock:
            return self._char_width


class PositionMetrics:
    """Conversión píxel ↔ carácter con ancho de carácter fijo."""

    def __init__(self, metrics: CharacterMetrics):
        self._metrics = metrics

    @property
    def char_width(self) -> float:
        return self._metrics.char_width

    def char_to_pixel(self, char_pos: int) -> int:
        return round_half_up(char_pos * self._metrics.char_width)

    def pixel_to_char(self, pixel_pos: int) -> int:
        return round_half_up(pixel_pos / self._metrics.char_width)

    def max_display_chars(self) -> int:
        width, char_width = self._metrics.snapshot()
        result = math.floor(width / char_width)
        if result <= 0:
            # Aún sin layout: algo grande para que el formateo tenga margen.
            logger.debug(f"Ancho desconocido ({width}px), usando {MAX_WIDTH} caracteres")
            return MAX_WIDTH
        # +1 por los puntos suspensivos ya descontados del ancho.
        return result + 1
