"""
Cálculo de los límites de desplazamiento de un resultado.

Es necesario predecir si los dígitos finales acabarán sustituidos por un
exponente: añadirlo solo al formatear sería más simple, pero produciría
saltos visibles durante las transiciones.
"""

import logging
import math

from position_metrics import PositionMetrics, round_half_up
from result_types import PositionKind, ResultDescriptor, ScrollRange

logger = logging.getLogger(__name__)

MAX_LEADING_ZEROES = 6   # ceros tras el punto antes de pasar a notación científica
MAX_TRAILING_ZEROES = 6  # ceros antes del punto antes de usar exponente positivo
SCI_NOTATION_EXTRA = 1   # carácter extra del punto en notación científica estándar
MAX_RIGHT_SCROLL = 10_000_000
MSD_SLACK = 3


def exponent_length(exponent: int) -> int:
    """Longitud en caracteres de ``e<exponente>``; 0 si no hay exponente."""
    if exponent == 0:
        return 0
    digits = math.ceil(math.log10(abs(exponent)))
    return digits + (1 if exponent >= 0 else 2)


def lsd_is_bounded(descriptor: ResultDescriptor) -> bool:
    lsd = descriptor.lsd
    return lsd.is_exact and lsd.value < MAX_RIGHT_SCROLL


class ScrollRangeCalculator:
    """Calcula posición mínima, máxima e inicial a partir de un descriptor."""

    def __init__(self, positions: PositionMetrics):
        self._positions = positions

    def calculate(self, descriptor: ResultDescriptor) -> ScrollRange:
        char_width = self._positions.char_width
        max_chars = self._positions.max_display_chars()

        # La posición inicial muestra los dígitos iniciales; nunca se
        # desplaza más a la izquierda.
        min_pos = round_half_up(descriptor.init_precision * char_width)
        current_pos = min_pos

        if not descriptor.msd.is_exact:
            if descriptor.lsd.kind is PositionKind.NONE:
                # Cero exacto.
                max_pos = min_pos
                return self._build(
                    min_pos,
                    max_pos,
                    self._positions.pixel_to_char(max_pos),
                    False,
                    current_pos,
                )

            # Puede ser un valor diminuto distinto de cero: dejar que el
            # usuario lo averigüe.
            return self._build(
                min_pos,
                MAX_RIGHT_SCROLL,
                MAX_RIGHT_SCROLL,
                True,
                current_pos,
                min_char_pos=self._positions.pixel_to_char(min_pos),
            )

        whole_len = descriptor.truncated_integer_part_length
        negative = 1 if descriptor.negative else 0
        msd = descriptor.msd.value
        if whole_len < msd <= whole_len + MSD_SLACK:
            # Evitar un exponente negativo diminuto: el msd pasa a estar
            # justo a la derecha del punto.
            msd = whole_len - 1

        # Dígito más a la izquierda respecto al punto; normalmente negativo.
        min_char_pos = msd - negative - whole_len
        if -1 < min_char_pos < MAX_LEADING_ZEROES + 2:
            # Pocos ceros iniciales: sin notación científica.
            min_char_pos = -1

        if not lsd_is_bounded(descriptor):
            return self._build(
                min_pos,
                MAX_RIGHT_SCROLL,
                MAX_RIGHT_SCROLL,
                True,
                current_pos,
                min_char_pos=min_char_pos,
            )

        lsd = descriptor.lsd.value
        adjusted_for_exp = False
        max_char_pos = lsd
        if -(MAX_TRAILING_ZEROES + 2) < max_char_pos < -1:
            max_char_pos = -1

        if max_char_pos < -1:
            # Todo el número a la izquierda del punto: hará falta exponente
            # positivo o ceros visibles.
            max_char_pos = min(-1, max_char_pos + exponent_length(-min_char_pos - 1))
            if max_char_pos >= -1:
                # Exponente enorme.
                max_char_pos = -1
            else:
                adjusted_for_exp = True
        elif min_char_pos > -1 or max_char_pos >= max_chars:
            # Número a la derecha del punto, o punto invisible al final del
            # desplazamiento: reservar sitio para el exponente.
            max_char_pos += exponent_length(-(min_char_pos + 1))
            adjusted_for_exp = True

        scrollable = max_char_pos - min_char_pos + negative >= max_chars
        if scrollable and adjusted_for_exp:
            # El exponente puede crecer un dígito al desplazarse.
            max_char_pos += exponent_length(-lsd) - exponent_length(-(min_char_pos + 1))

        max_pos = min(round_half_up(max_char_pos * char_width), MAX_RIGHT_SCROLL)
        if not scrollable:
            # Colocar el número de forma coherente con lo supuesto arriba.
            current_pos = max_pos

        return self._build(
            min_pos,
            max_pos,
            max_char_pos,
            scrollable,
            current_pos,
            min_char_pos=min_char_pos,
        )

    def _build(
        self,
        min_pos: int,
        max_pos: int,
        max_char_pos: int,
        scrollable: bool,
        current_pos: int,
        min_char_pos: int | None = None,
    ) -> ScrollRange:
        if max_pos < min_pos:
            max_pos = min_pos
        if not scrollable:
            min_pos = max_pos = current_pos
        if min_char_pos is None:
            min_char_pos = self._positions.pixel_to_char(min_pos)

        scroll_range = ScrollRange(
            min_pos=min_pos,
            max_pos=max_pos,
            min_char_pos=min_char_pos,
            max_char_pos=max_char_pos,
            scrollable=scrollable,
            initial_pos=current_pos,
        )
        logger.debug(f"Rango de desplazamiento: {scroll_range}")
        return scroll_range
