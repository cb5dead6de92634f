"""
Enumerations and naming rules for ImagCDF.

Codecs come in two flavours: a strict ``parse`` which raises
:class:`~imagcdf.errors.UnrecognizedValueError`, and ``parse_or_default``
which quietly falls back to a default for input it doesn't know.

>>> PublicationLevel.parse("3")
<PublicationLevel.LEVEL_3: '3'>
>>> StandardLevel.parse_or_default("nonsense")
<StandardLevel.NONE: 'None'>
>>> canonical_name(VariableType.GEOMAGNETIC_FIELD_ELEMENT, "H")
'GeomagneticFieldH'
"""
import enum

from .errors import (
    InvalidVariableTypeError,
    MissingElementCodeError,
    UnrecognizedValueError,
)

TITLE = "Geomagnetic time series data"
FORMAT_DESCRIPTION = "INTERMAGNET CDF Format"
SUPPORTED_FORMAT_VERSIONS = ("1.1", "1.2", "1.3")
FORMAT_VERSION = SUPPORTED_FORMAT_VERSIONS[-1]

MISSING_DATA_VALUE = 99999.0
MAX_ELEMENT_CODE_LENGTH = 9

VECTOR_TIMES_NAME = "GeomagneticVectorTimes"
SCALAR_TIMES_NAME = "GeomagneticScalarTimes"
TEMPERATURE_TIMES_NAME = "Temperature{}Times"
DISPLAY_TYPE = "time_series"

VECTOR_ELEMENTS = frozenset("XYZHDEVIF")
SCALAR_ELEMENTS = frozenset("SG")


class PublicationLevel(enum.Enum):
    LEVEL_1 = "1"
    LEVEL_2 = "2"
    LEVEL_3 = "3"
    LEVEL_4 = "4"

    @property
    def code(self):
        return self.value

    @classmethod
    def parse(cls, text):
        try:
            return cls(str(text).strip())
        except ValueError:
            raise UnrecognizedValueError("publication level", text) from None

    @classmethod
    def parse_or_default(cls, text):
        try:
            return cls.parse(text)
        except UnrecognizedValueError:
            return cls.LEVEL_1


class StandardLevel(enum.Enum):
    FULL = "Full"
    PARTIAL = "Partial"
    NONE = "None"

    @classmethod
    def parse(cls, text):
        """
        Case insensitive parse.

        >>> StandardLevel.parse("PARTIAL")
        <StandardLevel.PARTIAL: 'Partial'>
        """
        key = str(text).strip().lower()
        for level in cls:
            if level.value.lower() == key:
                return level
        raise UnrecognizedValueError("standard level", text)

    @classmethod
    def parse_or_default(cls, text):
        try:
            return cls.parse(text)
        except UnrecognizedValueError:
            return cls.NONE


class VariableType(enum.Enum):
    GEOMAGNETIC_FIELD_ELEMENT = "GeomagneticFieldElement"
    TEMPERATURE = "Temperature"
    ERROR = "Error"

    @property
    def prefix(self):
        """The start of the store name of variables of this type."""
        return _NAME_PREFIXES.get(self)

    @classmethod
    def parse(cls, text):
        key = str(text).strip().lower()
        for var_type in (cls.GEOMAGNETIC_FIELD_ELEMENT, cls.TEMPERATURE):
            if var_type.value.lower() == key:
                return var_type
        raise UnrecognizedValueError("variable type", text)

    @classmethod
    def parse_or_default(cls, text):
        """
        Members are passed through; unrecognised names give ``ERROR``.

        >>> VariableType.parse_or_default("temperature")
        <VariableType.TEMPERATURE: 'Temperature'>
        >>> VariableType.parse_or_default("Pressure")
        <VariableType.ERROR: 'Error'>
        """
        if isinstance(text, cls):
            return text
        try:
            return cls.parse(text)
        except UnrecognizedValueError:
            return cls.ERROR


_NAME_PREFIXES = {
    VariableType.GEOMAGNETIC_FIELD_ELEMENT: "GeomagneticField",
    VariableType.TEMPERATURE: "Temperature",
}


class ElementClass(enum.Enum):
    VECTOR = "vector"
    SCALAR = "scalar"
    TEMPERATURE = "temperature"
    INVALID = "invalid"


def classify_element(var_type, code):
    """
    Sorts a variable into the time stamp group it belongs to.

    Examples
    --------
    >>> classify_element(VariableType.GEOMAGNETIC_FIELD_ELEMENT, "h")
    <ElementClass.VECTOR: 'vector'>
    >>> classify_element(VariableType.GEOMAGNETIC_FIELD_ELEMENT, "S")
    <ElementClass.SCALAR: 'scalar'>
    >>> classify_element(VariableType.TEMPERATURE, "2")
    <ElementClass.TEMPERATURE: 'temperature'>
    >>> classify_element(VariableType.GEOMAGNETIC_FIELD_ELEMENT, "Q")
    <ElementClass.INVALID: 'invalid'>
    """
    var_type = VariableType.parse_or_default(var_type)
    if var_type is VariableType.GEOMAGNETIC_FIELD_ELEMENT:
        first = code[:1].upper()
        if first and first in VECTOR_ELEMENTS:
            return ElementClass.VECTOR
        if first and first in SCALAR_ELEMENTS:
            return ElementClass.SCALAR
        return ElementClass.INVALID
    if var_type is VariableType.TEMPERATURE:
        return ElementClass.TEMPERATURE
    return ElementClass.INVALID


def canonical_name(var_type, code):
    """The name a variable is stored under, e.g. ``Temperature1``."""
    prefix = VariableType.parse_or_default(var_type).prefix
    if prefix is None:
        raise InvalidVariableTypeError(code)
    return prefix + code


def depend_0_name(var_type, code):
    """
    The name of the time stamp variable for a data variable.

    Examples
    --------
    >>> depend_0_name(VariableType.GEOMAGNETIC_FIELD_ELEMENT, "Z")
    'GeomagneticVectorTimes'
    >>> depend_0_name(VariableType.TEMPERATURE, "1")
    'Temperature1Times'
    """
    element_class = classify_element(var_type, code)
    if element_class is ElementClass.VECTOR:
        return VECTOR_TIMES_NAME
    elif element_class is ElementClass.SCALAR:
        return SCALAR_TIMES_NAME
    elif element_class is ElementClass.TEMPERATURE and code:
        return TEMPERATURE_TIMES_NAME.format(code)
    raise MissingElementCodeError(code)


def axis_label(var_type, code):
    if VariableType.parse_or_default(var_type) is VariableType.TEMPERATURE:
        return "Temperature {}".format(code)
    return code


def elements_in(elements_recorded):
    """
    Splits an ElementsRecorded string into element codes.

    >>> elements_in("HDZF")
    ['H', 'D', 'Z', 'F']
    """
    return [code for code in elements_recorded.strip()]


_DATA_TYPE_LEVELS = {
    "V": PublicationLevel.LEVEL_1,
    "R": PublicationLevel.LEVEL_1,
    "P": PublicationLevel.LEVEL_2,
    "A": PublicationLevel.LEVEL_2,
    "Q": PublicationLevel.LEVEL_3,
    "D": PublicationLevel.LEVEL_4,
}


def publication_level_from_data_type(data_type):
    """
    Converts an IMF or IAGA-2002 data type to a publication level.

    Either the full name or its first letter is accepted.

    >>> publication_level_from_data_type("definitive")
    <PublicationLevel.LEVEL_4: '4'>
    >>> publication_level_from_data_type("P")
    <PublicationLevel.LEVEL_2: '2'>
    """
    try:
        return _DATA_TYPE_LEVELS[data_type.strip()[:1].upper()]
    except (KeyError, AttributeError):
        raise UnrecognizedValueError("data type", data_type) from None


def publication_level_from_data_type_or_default(data_type):
    try:
        return publication_level_from_data_type(data_type)
    except UnrecognizedValueError:
        return PublicationLevel.LEVEL_1
