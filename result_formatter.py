"""
Formato de una ventana de dígitos en una sola línea.

Se añaden dos tipos de exponente:

1) Si la ventana contiene el dígito inicial, notación científica estándar
   con un dígito a la izquierda del punto.
2) Si no, un exponente que interpreta la ventana truncada como un entero.

Los puntos suspensivos y los exponentes se colocan de forma que la mayoría
de los dígitos queden donde estarían sin ellos, para que el desplazamiento
no dé saltos. El resultado no está internacionalizado: se usa "e".
"""

from result_types import FormattedResult, Position
from scroll_range import MAX_LEADING_ZEROES, SCI_NOTATION_EXTRA


ELLIPSIS = "…"
EXACT_POINT_PRECISION = -1  # la ventana termina en las unidades: sin anotar


def naive_msd_pos(text: str) -> int | None:
    """Índice del primer carácter que no es '-', '.' ni '0', o None.

    A diferencia de la detección del evaluador, un 1 final cuenta como
    significativo.
    """
    for index, char in enumerate(text):
        if char not in "-.0":
            return index
    return None


class ResultFormatter:
    """Convierte la cadena del evaluador en el texto visible."""

    def format(
        self,
        raw: str,
        precision: int,
        max_chars: int,
        truncated: bool,
        negative: bool,
        force_exact_precision: bool = False,
        least_digit_pos: Position | None = None,
    ) -> FormattedResult:
        """Formatea ``raw``, cuyo último carácter es la posición ``precision``.

        Con ``force_exact_precision`` el último dígito mostrado es siempre
        ``precision`` y ``max_chars`` pasa a ser un límite orientativo.
        """
        minus_space = 1 if negative else 0
        if truncated:
            text = ELLIPSIS + raw[1:]
            msd = -1
        else:
            text = raw
            msd = naive_msd_pos(raw)  # None: se trata como muy grande

        dec_index = text.find(".")
        length = len(text)
        last_displayed = precision

        needs_exponent = (
            dec_index == -1
            or (msd is not None and msd - dec_index > MAX_LEADING_ZEROES + 1)
        ) and precision != EXACT_POINT_PRECISION
        if not needs_exponent:
            return FormattedResult(text, last_displayed)

        # Exponente de tipo 2; -1 por el punto decimal.
        exponent = -precision if precision > 0 else -precision - 1
        has_point = False
        if (
            msd is not None
            and 0 <= msd < max_chars - 1
            and length - msd + 1 + minus_space <= max_chars + SCI_NOTATION_EXTRA
        ):
            # Tipo 1: el dígito inicial está en la ventana. Un dígito, punto
            # y el resto, sin alargar más de SCI_NOTATION_EXTRA.
            fraction = text[msd + 1:]
            text = ("-" if negative else "") + text[msd] + "." + fraction
            exponent += length - msd - 1
            length = len(text)
            has_point = True

        if exponent == 0 and not truncated:
            return FormattedResult(text, last_displayed)

        exp_text = str(exponent)
        exp_digits = len(exp_text)
        if not force_exact_precision:
            # Quitar dígitos aunque haya sitio; si no, el desplazamiento salta.
            drop = exp_digits + 1
            if drop >= length - 1:
                drop = max(length - 2, 0)

            if not has_point:
                exponent += drop
                exp_text = str(exponent)
                # Quitar dígitos puede alargar el propio exponente.
                if exponent > 0 and len(exp_text) > exp_digits:
                    drop += 1
                    exponent += 1
                    exp_text = str(exponent)
                if (
                    least_digit_pos is not None
                    and least_digit_pos.is_exact
                    and precision - drop > least_digit_pos.value
                ):
                    # p. ej. 10^40 + 10^10: "…10e9" ocupa lo mismo que
                    # "…1e10" pero mostraría un cero final.
                    drop += 1
                    exponent += 1
                    exp_text = str(exponent)

            text = text[:length - drop]
            last_displayed -= drop

        return FormattedResult(f"{text}e{exp_text}", last_displayed)
