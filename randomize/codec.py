"""
String encodings of distribution parameters.

Two formats are supported:

- ``"g"`` (general): ``Normal distribution (0.00;10.00) [5.00;2.00] r:2``.
  Human-readable, two decimal places, rendered with the current ``locale``.
- ``"r"`` (round-trip): ``9:0;10:5;2:2``. Every number carries 17 significant
  digits in a fixed, locale-independent notation, so parsing the text
  reconstructs bit-identical values.

The JSON helpers persist a parameters value as its round-trip string.
"""

import json
import locale
import math
from typing import List, Optional, Tuple

from .distributions import DistributionType
from .errors import UNRECOGNIZED_FORMAT, ParameterFormatError
from .parameters import DEFAULT, ZERO, DistributionParameters

GENERAL_FORMAT = "g"
ROUND_TRIP_FORMAT = "r"

POSITIVE_INFINITY = "Infinity"
NEGATIVE_INFINITY = "-Infinity"
NOT_A_NUMBER = "NaN"


def _normalize_format(format: Optional[str]) -> str:
    if format is None or not format.strip() or format.lower() == GENERAL_FORMAT:
        return GENERAL_FORMAT
    if format.lower() == ROUND_TRIP_FORMAT:
        return ROUND_TRIP_FORMAT
    raise ValueError(UNRECOGNIZED_FORMAT)


def _format_special(value: float) -> Optional[str]:
    if math.isnan(value):
        return NOT_A_NUMBER
    if math.isinf(value):
        return POSITIVE_INFINITY if value > 0 else NEGATIVE_INFINITY
    return None


def format_round_trip_number(value: float) -> str:
    """Render *value* with 17 significant digits, e.g. ``0.10000000000000001`` or ``1E+20``."""
    special = _format_special(value)
    if special is not None:
        return special
    return "%.17G" % value


def format_general_number(value: float) -> str:
    """Render *value* with two decimal places in the current locale."""
    special = _format_special(value)
    if special is not None:
        return special
    return locale.format_string("%.2f", value)


def _parse_number(text: str, localized: bool) -> Optional[float]:
    text = text.strip()
    if not text or "_" in text:
        return None
    try:
        if localized:
            return locale.atof(text)
        return float(text.replace(",", ""))
    except ValueError:
        return None


def _parse_precision(text: str) -> Optional[int]:
    text = text.strip()
    if not text or "_" in text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if 0 <= value <= 255 else None


def _build(distribution_type: DistributionType, minimum: Optional[float], maximum: Optional[float],
           parameters: List[float], precision: Optional[int]) -> Optional[DistributionParameters]:
    kind = DistributionParameters.for_type(distribution_type)
    if kind.parameter_count is not None and len(parameters) > kind.parameter_count:
        return None
    try:
        return DistributionParameters.create(distribution_type, minimum, maximum, parameters, precision)
    except ValueError:
        return None


def _format_general(value: DistributionParameters) -> str:
    s = f"{value.distribution_type.label} distribution"
    if value.minimum is not None or value.maximum is not None:
        minimum = NEGATIVE_INFINITY if value.minimum is None else format_general_number(value.minimum)
        maximum = POSITIVE_INFINITY if value.maximum is None else format_general_number(value.maximum)
        s += f" ({minimum};{maximum})"
    if value.shape_parameters:
        s += " [" + ";".join(format_general_number(p) for p in value.shape_parameters) + "]"
    if value.precision is not None:
        s += f" r:{value.precision}"
    return s


def _format_round_trip(value: DistributionParameters) -> str:
    minimum = NEGATIVE_INFINITY if value.minimum is None else format_round_trip_number(value.minimum)
    maximum = POSITIVE_INFINITY if value.maximum is None else format_round_trip_number(value.maximum)
    parameters = ";".join(format_round_trip_number(p) for p in value.shape_parameters)
    precision = "" if value.precision is None else str(value.precision)
    return f"{value.distribution_type.value}:{minimum};{maximum}:{parameters}:{precision}"


def format_parameters(value: DistributionParameters, format: Optional[str] = None) -> str:
    """
    Encode *value* as text.

    Args:
        value: The parameters to encode.
        format: ``"g"`` (default) or ``"r"``, case-insensitive.

    Raises:
        ValueError: If the format is not recognized.
    """
    if _normalize_format(format) == ROUND_TRIP_FORMAT:
        return _format_round_trip(value)
    return _format_general(value)


def _parse_kind_label(text: str) -> Optional[DistributionType]:
    text = text.strip()
    try:
        return DistributionType.from_label(text)
    except ValueError:
        pass
    try:
        return DistributionType(int(text))
    except ValueError:
        return None


def _parse_general(text: str) -> Optional[DistributionParameters]:
    index = text.find(" distribution")
    if index == -1:
        return None
    distribution_type = _parse_kind_label(text[:index])
    if distribution_type is None:
        return None
    position = index + len(" distribution")

    minimum = maximum = None
    open_index = text.find("(", position)
    if open_index != -1:
        separator = text.find(";", open_index)
        if separator <= open_index + 1:
            return None
        low = _parse_number(text[open_index + 1:separator], localized=True)
        if low is None:
            return None
        close_index = text.find(")", separator)
        if close_index <= separator + 1:
            return None
        high = _parse_number(text[separator + 1:close_index], localized=True)
        if high is None:
            return None
        minimum = None if low == -math.inf else low
        maximum = None if high == math.inf else high
        position = close_index + 1

    parameters = []
    open_index = text.find("[", position)
    if open_index != -1:
        close_index = text.find("]", open_index)
        if close_index == -1:
            return None
        for part in text[open_index + 1:close_index].split(";"):
            number = _parse_number(part, localized=True)
            if number is None:
                return None
            parameters.append(number)
        position = close_index + 1

    precision = None
    index = text.find("r:", position)
    if index != -1:
        precision = _parse_precision(text[index + 2:])
        if precision is None:
            return None

    return _build(distribution_type, minimum, maximum, parameters, precision)


def _parse_round_trip(text: str) -> Optional[DistributionParameters]:
    kind_text, found, rest = text.partition(":")
    if not found:
        return None
    try:
        distribution_type = DistributionType(int(kind_text))
    except ValueError:
        return None

    minimum_text, found, rest = rest.partition(";")
    if not found or not minimum_text:
        return None
    maximum_text, found, rest = rest.partition(":")
    if not found or not maximum_text:
        return None
    low = _parse_number(minimum_text, localized=False)
    high = _parse_number(maximum_text, localized=False)
    if low is None or high is None:
        return None

    parameters_text, found, precision_text = rest.partition(":")
    if not found:
        return None
    parameters = []
    if parameters_text:
        for part in parameters_text.split(";"):
            number = _parse_number(part, localized=False)
            if number is None:
                return None
            parameters.append(number)

    precision = None
    if precision_text:
        precision = _parse_precision(precision_text)
        if precision is None:
            return None

    return _build(
        distribution_type,
        None if low == -math.inf else low,
        None if high == math.inf else high,
        parameters,
        precision,
    )


def try_parse_exact(text: Optional[str], format: Optional[str] = None) -> Tuple[bool, DistributionParameters]:
    """
    Parse *text* in exactly one format.

    Returns:
        ``(True, value)`` on success, otherwise ``(False, DEFAULT)``.

    Raises:
        ValueError: If the format is not recognized.
    """
    format = _normalize_format(format)
    if text is None or not text.strip():
        return False, DEFAULT
    if format == ROUND_TRIP_FORMAT:
        result = _parse_round_trip(text)
    else:
        result = _parse_general(text)
    if result is None:
        return False, DEFAULT
    return True, result


def try_parse(text: Optional[str]) -> Tuple[bool, DistributionParameters]:
    """
    Parse *text*, trying the general format first and then the round-trip one.

    Returns:
        ``(True, value)`` on success. Blank text gives ``(False, DEFAULT)``
        and unparseable text ``(False, ZERO)``.
    """
    if text is None or not text.strip():
        return False, DEFAULT
    for format in (GENERAL_FORMAT, ROUND_TRIP_FORMAT):
        success, result = try_parse_exact(text, format)
        if success:
            return True, result
    return False, ZERO


def parse(text: Optional[str]) -> DistributionParameters:
    """
    Parse *text* in either format.

    Raises:
        ParameterFormatError: If the text is blank or matches neither format.
    """
    success, result = try_parse(text)
    if not success:
        raise ParameterFormatError(text)
    return result


def parse_exact(text: Optional[str], format: Optional[str] = None) -> DistributionParameters:
    """
    Parse *text* in the given format.

    Raises:
        ParameterFormatError: If the text is blank or does not match the format.
        ValueError: If the format is not recognized.
    """
    success, result = try_parse_exact(text, format)
    if not success:
        raise ParameterFormatError(text)
    return result


class ParametersJSONEncoder(json.JSONEncoder):
    """JSON encoder that writes DistributionParameters as round-trip strings."""

    def default(self, o):
        if isinstance(o, DistributionParameters):
            return format_parameters(o, ROUND_TRIP_FORMAT)
        return super().default(o)


def to_json(value: DistributionParameters) -> str:
    return json.dumps(format_parameters(value, ROUND_TRIP_FORMAT))


def from_json(document: str) -> DistributionParameters:
    """Read a parameters value from a JSON string holding its round-trip encoding."""
    text = json.loads(document)
    if not isinstance(text, str):
        raise ParameterFormatError(repr(text))
    return parse_exact(text, ROUND_TRIP_FORMAT)
