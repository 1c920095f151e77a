"""Inspector de desplazamiento del campo de resultado en la terminal."""

import logging
import sys
from fractions import Fraction

from mpmath import mp

from digit_source import ArbitraryPrecisionDigitSource
from position_metrics import CharacterMetrics
from result_window import DisplayWindowController


DISPLAY_WIDTH_CHARS = 16
CHAR_WIDTH_PIXELS = 10
AP_INITIAL_DIGITS = 120
AP_PRECISION_STEP = 120

CONSTANTS = {
    "pi": lambda: +mp.pi,
    "π": lambda: +mp.pi,
    "e": lambda: +mp.e,
    "phi": lambda: +mp.phi,
    "sqrt2": lambda: mp.sqrt(2),
    "ln2": lambda: +mp.ln2,
}


def parse_value(text: str):
    """Literal exacto (entero, decimal, p/q) o constante de mpmath."""
    name = text.strip()
    if name in CONSTANTS:
        return CONSTANTS[name]
    try:
        return Fraction(name)
    except (ValueError, ZeroDivisionError) as exc:
        raise ValueError(f"Valor no reconocido: {text}") from exc


def build_controller(value, width_chars: int, char_width: float, digits: int):
    metrics = CharacterMetrics(
        display_width_pixels=round(width_chars * char_width),
        reserved_ellipsis_pixels=round(char_width),
        char_width_pixels=char_width,
    )
    source = ArbitraryPrecisionDigitSource(
        value,
        initial_digits=digits,
        precision_step=AP_PRECISION_STEP,
    )
    controller = DisplayWindowController(source, metrics)
    descriptor = source.describe(controller.positions.max_display_chars())
    controller.display_result(descriptor)
    return controller


def walk(controller: DisplayWindowController, steps: int) -> list[str]:
    """Desplaza carácter a carácter y devuelve los textos distintos."""
    states = [controller.text]
    char_width = controller.positions.char_width
    for _ in range(steps):
        target = controller.current_pos + round(char_width)
        if not controller.on_scroll_position_changed(target):
            break
        if controller.text != states[-1]:
            states.append(controller.text)
    return states


def inspect_scroll_states(
    value_text: str,
    *,
    width: int = DISPLAY_WIDTH_CHARS,
    char_width: float = CHAR_WIDTH_PIXELS,
    steps: int = 20,
    digits: int = AP_INITIAL_DIGITS,
    show: int = 10,
) -> None:
    controller = build_controller(parse_value(value_text), width, char_width, digits)
    scroll_range = controller.scroll_range
    states = walk(controller, steps)

    print("Scroll inspection")
    print(f"value:          {value_text}")
    print(f"width:          {width} chars")
    print(f"scrollable:     {controller.scrollable}")
    print(f"range (px):     {scroll_range.min_pos} .. {scroll_range.max_pos}")
    print(f"range (chars):  {scroll_range.min_char_pos} .. {scroll_range.max_char_pos}")
    print("states:")
    for i, text in enumerate(states[:max(1, show)], start=1):
        print(f"  {i}. {text}")
    print(f"full text:      {controller.get_full_text()}")
    print(f"exact:          {controller.is_exact_at_full_text()}")


def _read_flag(argv: list[str], flag: str, default, cast=int):
    if flag not in argv:
        return default
    idx = argv.index(flag)
    try:
        return cast(argv[idx + 1])
    except (ValueError, IndexError):
        raise SystemExit(f"Invalid value for {flag}")


def main(argv: list[str] | None = None) -> None:
    # Uso rápido:
    #   python main.py 1/3
    #   python main.py pi --width 12 --steps 30 --show 8
    #   python main.py 265252859812191058636308480000000 --verbose
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0].startswith("--"):
        raise SystemExit("Missing value to inspect")

    if "--verbose" in argv:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        inspect_scroll_states(
            argv[0],
            width=_read_flag(argv, "--width", DISPLAY_WIDTH_CHARS),
            char_width=_read_flag(argv, "--char-width", CHAR_WIDTH_PIXELS, float),
            steps=_read_flag(argv, "--steps", 20),
            digits=_read_flag(argv, "--digits", AP_INITIAL_DIGITS),
            show=_read_flag(argv, "--show", 10),
        )
    except (ValueError, ArithmeticError) as exc:
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
