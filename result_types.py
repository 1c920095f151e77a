"""
Tipos compartidos por el motor de la ventana de resultado.

Convención de posiciones: la posición ``k`` corresponde al dígito ``10^-k``
contando el punto decimal como un carácter; ``0`` es el propio punto,
``-1`` las unidades, ``-2`` las decenas, etc.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class PositionKind(Enum):
    EXACT = "exact"
    UNKNOWN = "unknown"
    UNBOUNDED = "unbounded"
    NONE = "none"


@dataclass(frozen=True)
class Position:
    """Posición de un dígito, o la razón por la que no se conoce."""

    kind: PositionKind
    value: int = 0

    @classmethod
    def exact(cls, value: int) -> Position:
        return cls(PositionKind.EXACT, int(value))

    @property
    def is_exact(self) -> bool:
        return self.kind is PositionKind.EXACT

    def __str__(self) -> str:
        if self.is_exact:
            return str(self.value)
        return self.kind.value


MSD_UNKNOWN = Position(PositionKind.UNKNOWN)
LSD_UNBOUNDED = Position(PositionKind.UNBOUNDED)
# Cero exacto: no existe un dígito distinto de cero.
LSD_EXACT_ZERO = Position(PositionKind.NONE)


@dataclass(frozen=True)
class ResultDescriptor:
    """Datos dispersos de un resultado nuevo, producidos por el evaluador.

    ``msd`` es el índice del primer dígito distinto de cero dentro de la
    cadena ``[-]III.FFF`` del evaluador; ``truncated_integer_part_length``
    incluye el signo.
    """

    init_precision: int
    msd: Position
    lsd: Position
    truncated_integer_part_length: int
    negative: bool = False

    def __post_init__(self):
        if self.msd.kind not in (PositionKind.EXACT, PositionKind.UNKNOWN):
            raise ValueError("El msd debe ser exacto o desconocido")
        if self.lsd.kind is PositionKind.NONE and self.msd.is_exact:
            raise ValueError("Un cero exacto no puede tener msd conocido")
        if self.truncated_integer_part_length < 0:
            raise ValueError("La longitud de la parte entera no puede ser negativa")

    @classmethod
    def from_whole_part(
        cls,
        init_precision: int,
        msd: Position,
        lsd: Position,
        whole_part: str,
    ) -> ResultDescriptor:
        return cls(
            init_precision=init_precision,
            msd=msd,
            lsd=lsd,
            truncated_integer_part_length=len(whole_part),
            negative=whole_part.startswith("-"),
        )


@dataclass(frozen=True)
class ScrollRange:
    min_pos: int
    max_pos: int
    min_char_pos: int
    max_char_pos: int
    scrollable: bool
    initial_pos: int


@dataclass(frozen=True)
class FormattedResult:
    text: str
    last_displayed_digit: int

    @property
    def exponent_index(self) -> int | None:
        index = self.text.find("e")
        return index if index > 0 else None

    @property
    def exponent_marks_position(self) -> bool:
        """El exponente solo indica qué dígitos se ven (no hay punto)."""
        return self.exponent_index is not None and "." not in self.text


@dataclass
class WindowState:
    current_pos: int = 0
    last_rendered_pos: int | None = None
    valid: bool = False
    scrollable: bool = False
    last_displayed_digit: int = 0


class DisplayState(Enum):
    EMPTY = "empty"
    VALID_STATIC = "valid_static"
    VALID_SCROLLABLE = "valid_scrollable"
    ERROR = "error"


@dataclass(frozen=True)
class DigitWindow:
    """Ventana de dígitos devuelta por la fuente de dígitos.

    ``precision`` es la precisión realmente usada, que puede diferir de la
    solicitada.
    """

    text: str
    precision: int
    truncated: bool
    negative: bool


@dataclass(frozen=True)
class CopyPayload:
    text: str
    token: str | None = None


class DigitSource(Protocol):
    def get_digits(
        self,
        requested_precision: int,
        max_char_pos_seen: int,
        max_size: int,
    ) -> DigitWindow:
        ...
