"""
Ventana "infinita" sobre los dígitos de un resultado.

La vista externa llama a este controlador al cambiar de tamaño, al llegar
un resultado nuevo y al cambiar la posición de desplazamiento; el
controlador pide a la fuente de dígitos la porción visible y la formatea.
"""

import logging

from position_metrics import CharacterMetrics, PositionMetrics
from result_formatter import ResultFormatter
from result_types import (
    LSD_UNBOUNDED,
    CopyPayload,
    DigitSource,
    DisplayState,
    FormattedResult,
    ResultDescriptor,
    ScrollRange,
    WindowState,
)
from scroll_range import MAX_RIGHT_SCROLL, ScrollRangeCalculator

logger = logging.getLogger(__name__)

MAX_COPY_SIZE = 1_000_000


class DisplayWindowController:
    """Estado de desplazamiento y último texto mostrado de un resultado."""

    def __init__(
        self,
        digit_source: DigitSource | None = None,
        metrics: CharacterMetrics | None = None,
    ):
        self._source = digit_source
        self._metrics = metrics if metrics is not None else CharacterMetrics()
        self._positions = PositionMetrics(self._metrics)
        self._calculator = ScrollRangeCalculator(self._positions)
        self._formatter = ResultFormatter()

        self._window = WindowState()
        self._range: ScrollRange | None = None
        self._lsd = LSD_UNBOUNDED
        self._rendered: FormattedResult | None = None
        self._error: str | None = None

    # ── Propiedades ──────────────────────────────────────────────

    @property
    def positions(self) -> PositionMetrics:
        return self._positions

    @property
    def digit_source(self) -> DigitSource | None:
        return self._source

    @digit_source.setter
    def digit_source(self, source: DigitSource | None):
        self._source = source

    @property
    def state(self) -> DisplayState:
        if self._error is not None:
            return DisplayState.ERROR
        if not self._window.valid:
            return DisplayState.EMPTY
        if self._window.scrollable:
            return DisplayState.VALID_SCROLLABLE
        return DisplayState.VALID_STATIC

    @property
    def window(self) -> WindowState:
        return self._window

    @property
    def scroll_range(self) -> ScrollRange | None:
        return self._range

    @property
    def scrollable(self) -> bool:
        return self._window.scrollable

    @property
    def current_pos(self) -> int:
        return self._window.current_pos

    @property
    def rendered(self) -> FormattedResult | None:
        return self._rendered

    @property
    def text(self) -> str:
        if self._error is not None:
            return self._error
        if self._rendered is None:
            return ""
        return self._rendered.text

    def current_char_pos(self) -> int:
        return self._positions.pixel_to_char(self._window.current_pos)

    # ── Operaciones invocadas por la vista ───────────────────────

    def display_result(self, descriptor: ResultDescriptor) -> FormattedResult:
        logger.info(f"Nuevo resultado: {descriptor}")
        scroll_range = self._calculator.calculate(descriptor)
        self._range = scroll_range
        self._lsd = descriptor.lsd
        self._error = None
        self._window = WindowState(
            current_pos=scroll_range.initial_pos,
            last_rendered_pos=None,
            valid=False,
            scrollable=scroll_range.scrollable,
        )
        return self._redisplay()

    def display_error(self, message: str):
        logger.info(f"Error mostrado: {message}")
        self._error = message
        self._rendered = None
        self._range = None
        self._window = WindowState(valid=True, scrollable=False)

    def on_scroll_position_changed(self, new_pos: int) -> bool:
        """Mueve la ventana; devuelve True si hubo que volver a formatear."""
        if not self._window.scrollable or self._range is None:
            return False

        clamped = min(max(new_pos, self._range.min_pos), self._range.max_pos)
        self._window.current_pos = clamped
        if clamped == self._window.last_rendered_pos:
            return False

        self._redisplay()
        return True

    def on_resize(
        self,
        width_pixels: int,
        char_width: float,
        reserved_ellipsis_pixels: int | None = None,
    ):
        # Sin volver a formatear: el llamador lo pide con las medidas nuevas.
        self._metrics.update(width_pixels, char_width, reserved_ellipsis_pixels)

    def get_full_text(self) -> str:
        """Texto completo hasta la precisión mostrada, para copiar."""
        if self._error is not None:
            return self._error
        if not self._window.valid:
            return ""
        if not self._window.scrollable:
            return self.text

        result = self._formatted_result(
            self._window.last_displayed_digit,
            MAX_COPY_SIZE,
            force_exact_precision=True,
        )
        return result.text

    def get_copy_payload(self) -> CopyPayload:
        capture = getattr(self._source, "capture", None)
        token = capture() if capture is not None and self._error is None else None
        return CopyPayload(self.get_full_text(), token)

    def is_exact_at_full_text(self) -> bool:
        if not self._window.scrollable or self._range is None:
            return True
        max_char_pos = self._range.max_char_pos
        return (
            max_char_pos == self.current_char_pos()
            and max_char_pos != MAX_RIGHT_SCROLL
        )

    def clear(self):
        self._window = WindowState()
        self._range = None
        self._rendered = None
        self._error = None
        self._lsd = LSD_UNBOUNDED

    # ── Formato ──────────────────────────────────────────────────

    def _redisplay(self) -> FormattedResult:
        result = self._formatted_result(
            self.current_char_pos(),
            self._positions.max_display_chars(),
            force_exact_precision=False,
        )
        self._rendered = result
        self._window.last_rendered_pos = self._window.current_pos
        self._window.last_displayed_digit = result.last_displayed_digit
        self._window.valid = True
        logger.debug(f"Posición {self._window.current_pos}: {result.text!r}")
        return result

    def _formatted_result(
        self,
        char_pos: int,
        max_size: int,
        force_exact_precision: bool,
    ) -> FormattedResult:
        if self._source is None:
            raise RuntimeError("No hay fuente de dígitos asignada")

        max_char_pos = self._range.max_char_pos if self._range is not None else MAX_RIGHT_SCROLL
        digits = self._source.get_digits(char_pos, max_char_pos, max_size)
        return self._formatter.format(
            digits.text,
            digits.precision,
            max_size,
            digits.truncated,
            digits.negative,
            force_exact_precision=force_exact_precision,
            least_digit_pos=self._lsd,
        )
