"""Fuente de dígitos de precisión arbitraria con expansión progresiva."""

from __future__ import annotations

import logging
from fractions import Fraction

from result_types import (
    LSD_EXACT_ZERO,
    LSD_UNBOUNDED,
    MSD_UNKNOWN,
    DigitWindow,
    Position,
    ResultDescriptor,
)
from scroll_range import MAX_RIGHT_SCROLL

try:
    from mpmath import mp
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "mpmath no está instalado. Instala con: pip install mpmath"
    ) from exc

logger = logging.getLogger(__name__)


class ArbitraryPrecisionDigitSource:
    """Produce ventanas de dígitos de un valor, truncadas hacia cero.

    ``value`` puede ser un número (int, Fraction, float, cadena decimal o
    mpf), que se convierte exactamente a Fraction, o una función sin
    argumentos que se vuelve a evaluar con mpmath a mayor precisión cuando
    hacen falta más dígitos.
    """

    GUARD_DIGITS = 10
    MSD_SLACK = 3  # misma holgura que el cálculo de límites

    def __init__(self, value, initial_digits: int = 120, precision_step: int = 120):
        if callable(value):
            self._function = value
            self._exact = None
        else:
            self._function = None
            self._exact = self._to_fraction(value)

        self._label = getattr(value, "__name__", None) or str(value)
        self._initial_digits = max(8, initial_digits)
        self._precision_step = max(8, precision_step)

        self._cache = ""
        self._cache_digits = -1

    @property
    def is_exact(self) -> bool:
        return self._exact is not None

    @staticmethod
    def _to_fraction(value) -> Fraction:
        if isinstance(value, mp.mpf):
            if not mp.isfinite(value):
                raise ValueError("El valor no es finito")
            man, exp = value.man_exp
            return Fraction(int(man)) * Fraction(2) ** int(exp)
        if isinstance(value, str):
            return Fraction(value.strip())
        return Fraction(value)

    # ── Caché de dígitos ─────────────────────────────────────────

    def _ensure_digits(self, digits: int, limit: int | None = None):
        if digits <= self._cache_digits:
            return

        target = max(digits, self._cache_digits + self._precision_step)
        if limit is not None and limit >= digits:
            target = min(target, limit)

        self._cache = self._render(target)
        self._cache_digits = target
        logger.debug(f"Caché de '{self._label}' ampliada a {target} decimales")

    def _render(self, digits: int) -> str:
        negative, scaled = self._scaled_value(digits)
        body = str(scaled).rjust(digits + 1, "0")
        integer_part = body[:len(body) - digits]
        fraction_part = body[len(body) - digits:] if digits > 0 else ""
        sign = "-" if negative else ""
        return f"{sign}{integer_part}.{fraction_part}"

    def _scaled_value(self, digits: int) -> tuple[bool, int]:
        """Devuelve (negativo, floor(|valor| * 10^digits))."""
        if self._exact is not None:
            value = self._exact
            scaled = abs(value.numerator) * 10**digits // value.denominator
            return value < 0, scaled

        with mp.workdps(40):
            estimate = self._function()
            if estimate != 0 and abs(estimate) >= 1:
                integer_digits = int(mp.floor(mp.log10(abs(estimate)))) + 1
            else:
                integer_digits = 1

        internal_dps = max(40, integer_digits + digits + self.GUARD_DIGITS)
        with mp.workdps(internal_dps):
            value = self._function()
            if not mp.isfinite(value):
                raise ValueError("El valor no es finito")
            scaled = int(mp.floor(abs(value) * mp.mpf(10) ** digits))
            return value < 0, scaled

    # ── Ventanas de dígitos ──────────────────────────────────────

    def get_digits(
        self,
        requested_precision: int,
        max_char_pos_seen: int,
        max_size: int,
    ) -> DigitWindow:
        precision = requested_precision
        if precision > MAX_RIGHT_SCROLL:
            logger.warning(
                f"Precisión {precision} recortada a {MAX_RIGHT_SCROLL}"
            )
            precision = MAX_RIGHT_SCROLL

        needed = max(precision, 0)
        limit = max_char_pos_seen if max_char_pos_seen < MAX_RIGHT_SCROLL else None
        self._ensure_digits(needed, limit)

        cache = self._cache
        sign = "-" if cache.startswith("-") else ""
        dec_index = cache.index(".")
        # 0 termina en el punto, -1 en las unidades, -2 en las decenas...
        body = cache[:max(dec_index + precision + 1, 0)]
        if len(body) <= len(sign):
            body = sign + "0"

        truncated = False
        if len(body) > max_size:
            start = len(body) - max_size
            dropped = body[:start]
            # Perder el signo también cuenta: la elipsis lo sustituye.
            truncated = any(c not in ".0" for c in dropped)
            body = body[start:]

        return DigitWindow(
            text=body,
            precision=precision,
            truncated=truncated,
            negative=bool(sign),
        )

    def capture(self) -> str:
        """Testigo opaco para reconocer el valor al pegarlo de nuevo."""
        return self._label

    # ── Descripción del resultado ────────────────────────────────

    def describe(self, max_chars: int) -> ResultDescriptor:
        self._ensure_digits(self._initial_digits)

        if self._exact is not None and self._exact == 0:
            return ResultDescriptor.from_whole_part(
                -1, MSD_UNKNOWN, LSD_EXACT_ZERO, self._whole_part()
            )

        msd = self._msd_index()
        while msd is None and self._exact is not None:
            # Valor exacto distinto de cero: seguro que aparece un dígito.
            self._ensure_digits(self._cache_digits + self._precision_step)
            msd = self._msd_index()

        whole_part = self._whole_part()
        if msd is None:
            # Posible cero: se muestran ceros y se deja desplazar.
            return ResultDescriptor.from_whole_part(
                max(max_chars - 2, 1), MSD_UNKNOWN, LSD_UNBOUNDED, whole_part
            )

        lsd = self._least_significant_digit()
        init_precision = self._preferred_precision(whole_part, msd, lsd, max_chars)
        descriptor = ResultDescriptor.from_whole_part(
            init_precision, Position.exact(msd), lsd, whole_part
        )
        logger.debug(f"Descriptor de '{self._label}': {descriptor}")
        return descriptor

    def _whole_part(self) -> str:
        return self._cache[:self._cache.index(".")]

    def _msd_index(self) -> int | None:
        for index, char in enumerate(self._cache):
            if char not in "-.0":
                return index
        return None

    def _least_significant_digit(self) -> Position:
        value = self._exact
        if value is None:
            return LSD_UNBOUNDED

        if value.denominator == 1:
            magnitude = abs(value.numerator)
            trailing = len(str(magnitude)) - len(str(magnitude).rstrip("0"))
            return Position.exact(-(trailing + 1))

        denominator = value.denominator
        twos = fives = 0
        while denominator % 2 == 0:
            denominator //= 2
            twos += 1
        while denominator % 5 == 0:
            denominator //= 5
            fives += 1
        if denominator != 1:
            # Decimal periódico.
            return LSD_UNBOUNDED
        return Position.exact(max(twos, fives))

    def _preferred_precision(
        self,
        whole_part: str,
        msd: int,
        lsd: Position,
        max_chars: int,
    ) -> int:
        whole_len = len(whole_part)
        negative = 1 if whole_part.startswith("-") else 0
        if lsd.is_exact:
            if whole_len <= max_chars and lsd.value < 0:
                # Entero exacto: sin punto decimal.
                return -1
            if lsd.value > 0 and whole_len + lsd.value + 1 <= max_chars:
                # Decimal exacto que cabe entero.
                return lsd.value

        if whole_len < msd <= whole_len + self.MSD_SLACK + 1:
            msd = whole_len - 1
        # msd a la izquierda; la notación científica conserva esa parte.
        return msd - whole_len + max_chars - negative - 1
