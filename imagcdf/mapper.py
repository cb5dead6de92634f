"""
Maps ImagCDF metadata and variables onto a :class:`~imagcdf.store.Store`.

Usage order
-----------

To write a file, write the global attributes first, then each variable and
its time stamps. To read a file, read the global attributes first: their
``elements_recorded`` says which geomagnetic variables exist. Temperatures
are found by trying ``Temperature1``, ``Temperature2``, ... in turn.

Nothing here enforces that order. :class:`imagcdf.file.ImagCDFFile` tracks
it and logs a warning when it is not followed.

Every function stops at the first failure and raises it; nothing is retried.
"""
import logging
import math

from .config import DEFAULT_CONFIG
from .errors import (
    AttributeNotFoundError,
    ImagCDFError,
    MissingElementCodeError,
    Status,
    StoreError,
    ValidationError,
    VariableNotFoundError,
    report_status,
)
from .model import GlobalAttributes, TimestampSeries, Variable
from .schema import (
    DISPLAY_TYPE,
    FORMAT_DESCRIPTION,
    MAX_ELEMENT_CODE_LENGTH,
    SUPPORTED_FORMAT_VERSIONS,
    TITLE,
    PublicationLevel,
    StandardLevel,
    VariableType,
    axis_label,
    canonical_name,
    depend_0_name,
    elements_in,
)
from .store import Kind
from .terms import INTERMAGNET_TERMS_OF_USE
from .times import is_strictly_increasing

logger = logging.getLogger(__name__)

# (store name, field, kind, optional) in the order they are written and read
GLOBAL_ATTRIBUTES = (
    ("FormatDescription", "format_description", Kind.STRING, False),
    ("FormatVersion", "format_version", Kind.STRING, False),
    ("Title", "title", Kind.STRING, False),
    ("IagaCode", "iaga_code", Kind.STRING, False),
    ("ElementsRecorded", "elements_recorded", Kind.STRING, False),
    ("PublicationLevel", "publication_level", Kind.STRING, False),
    ("PublicationDate", "publication_date", Kind.TIMESTAMP, False),
    ("ObservatoryName", "observatory_name", Kind.STRING, False),
    ("Latitude", "latitude", Kind.DOUBLE, False),
    ("Longitude", "longitude", Kind.DOUBLE, False),
    ("Elevation", "elevation", Kind.DOUBLE, False),
    ("Institution", "institution", Kind.STRING, False),
    ("VectorSensOrient", "vector_sensor_orientation", Kind.STRING, True),
    ("StandardLevel", "standard_level", Kind.STRING, False),
    ("StandardName", "standard_name", Kind.STRING, True),
    ("StandardVersion", "standard_version", Kind.STRING, True),
    ("PartialStandDesc", "partial_standard_description", Kind.STRING, True),
    ("Source", "source", Kind.STRING, False),
    ("TermsOfUse", "terms_of_use", Kind.STRING, True),
    ("UniqueIdentifier", "unique_identifier", Kind.STRING, True),
)
INDEXED_GLOBAL_ATTRIBUTES = (
    ("ParentIdentifiers", "parent_identifiers"),
    ("ReferenceLinks", "reference_links"),
)

# (store name, field, kind) in the order they are read; written as the first
# six of VARIABLE_ATTRIBUTE_ORDER
VARIABLE_ATTRIBUTES = (
    ("FIELDNAM", "field_name", Kind.STRING),
    ("UNITS", "units", Kind.STRING),
    ("FILLVAL", "fill_value", Kind.DOUBLE),
    ("VALIDMIN", "valid_min", Kind.DOUBLE),
    ("VALIDMAX", "valid_max", Kind.DOUBLE),
    ("DEPEND_0", "depend_0", Kind.STRING),
)
VARIABLE_ATTRIBUTE_ORDER = tuple(a[0] for a in VARIABLE_ATTRIBUTES) + (
    "DISPLAY_TYPE",
    "LABLAXIS",
)


def _is_blank(value):
    return value is None or value == ""


def with_defaults(attrs, format_version=None):
    """
    A copy of ``attrs`` with blank fixed fields filled in.

    The title, format description, format version and terms of use get their
    standard values when blank. ``attrs`` itself is left alone.

    Examples
    --------
    >>> attrs = with_defaults(GlobalAttributes(iaga_code="ESK"))
    >>> attrs.title, attrs.format_description, attrs.format_version
    ('Geomagnetic time series data', 'INTERMAGNET CDF Format', '1.3')
    """
    changes = {}
    if _is_blank(attrs.title):
        changes["title"] = TITLE
    if _is_blank(attrs.format_description):
        changes["format_description"] = FORMAT_DESCRIPTION
    if _is_blank(attrs.format_version):
        changes["format_version"] = format_version or DEFAULT_CONFIG.format_version
    if _is_blank(attrs.terms_of_use):
        changes["terms_of_use"] = INTERMAGNET_TERMS_OF_USE
    return attrs.copy(**changes)


def is_supported_version(text):
    """
    Checks a FormatVersion string is one this package understands.

    The version is scaled by ten and rounded, so ``"1.10"`` is ``1.1``.

    >>> [is_supported_version(v) for v in ("1.1", "1.2", "1.3")]
    [True, True, True]
    >>> [is_supported_version(v) for v in ("1.0", "1.4", "abc")]
    [False, False, False]
    """
    try:
        value = float(text)
    except (TypeError, ValueError):
        return False
    if not math.isfinite(value):
        return False
    scaled = int(math.floor(value * 10 + 0.5))
    return scaled in {int(v.replace(".", "")) for v in SUPPORTED_FORMAT_VERSIONS}


def _encode_field(field, value):
    if field in ("publication_level", "standard_level"):
        return value.value
    return value


def _decode_field(field, value, name):
    if field == "publication_level":
        level = PublicationLevel.parse_or_default(value)
        if level.value != value.strip():
            report_status(Status.DEFAULT_SUBSTITUTED, "Reading global attribute", name)
        return level
    if field == "standard_level":
        level = StandardLevel.parse_or_default(value)
        if level.value.lower() != value.strip().lower():
            report_status(Status.DEFAULT_SUBSTITUTED, "Reading global attribute", name)
        return level
    return value


def write_global_attributes(store, attrs, config=None):
    """
    Writes the global attributes.

    Blank fixed fields are written with their defaults (see
    :func:`with_defaults`). Optional fields that are None are not written,
    and any value already in the store for them is removed. Indexed
    attributes replace every entry already stored.

    Returns
    -------
    GlobalAttributes
        The attributes as written, defaults included.

    Raises
    ------
    StoreError
        Naming the first attribute the store would not take.
    """
    config = config or DEFAULT_CONFIG
    attrs = with_defaults(attrs, config.format_version)
    operation = "Error writing global attribute"
    for name, field, kind, optional in GLOBAL_ATTRIBUTES:
        value = getattr(attrs, field)
        try:
            if optional and value is None:
                store.delete_global_attr(name)
                continue
            store.put_global_attr(name, 0, _encode_field(field, value), kind)
        except StoreError as e:
            raise StoreError(e.status, operation, name) from e
    for name, field in INDEXED_GLOBAL_ATTRIBUTES:
        try:
            store.delete_global_attr(name)
        except StoreError as e:
            raise StoreError(e.status, operation, name) from e
        for index, value in enumerate(getattr(attrs, field)):
            try:
                store.put_global_attr(name, index, value, Kind.STRING)
            except StoreError as e:
                raise StoreError(
                    e.status, operation, "{}[{}]".format(name, index)
                ) from e
    logger.debug("Wrote global attributes for %s", attrs.iaga_code)
    return attrs


def read_indexed(store, name, max_entries=None):
    """
    Reads entries 0, 1, 2, ... of a string attribute until one is missing.

    Raises
    ------
    StoreError
        With status ``TOO_MANY_ENTRIES`` if more than ``max_entries`` exist.
    """
    if max_entries is None:
        max_entries = DEFAULT_CONFIG.max_indexed_entries
    values = []
    for index in range(max_entries + 1):
        try:
            value = store.get_global_attr(name, index, Kind.STRING)
        except AttributeNotFoundError:
            return values
        if index == max_entries:
            break
        values.append(value)
    raise StoreError(
        Status.TOO_MANY_ENTRIES,
        "More than {} entries in global attribute".format(max_entries),
        name,
    )


def validate_global_attributes(attrs):
    """
    Checks the fixed fields of a set of global attributes.

    Raises
    ------
    ValidationError
        Naming the first of Title, FormatDescription, FormatVersion that has
        the wrong value.
    """
    if attrs.title.lower() != TITLE.lower():
        raise ValidationError("Title", attrs.title, repr(TITLE))
    if attrs.format_description.lower() != FORMAT_DESCRIPTION.lower():
        raise ValidationError(
            "FormatDescription", attrs.format_description, repr(FORMAT_DESCRIPTION)
        )
    if not is_supported_version(attrs.format_version):
        raise ValidationError(
            "FormatVersion",
            attrs.format_version,
            "one of " + ", ".join(SUPPORTED_FORMAT_VERSIONS),
        )


def read_global_attributes(store, config=None):
    """
    Reads and checks the global attributes.

    Optional attributes that are missing come back as None; indexed
    attributes with no entries come back as empty lists.

    Raises
    ------
    StoreError
        If a required attribute is missing or unreadable.
    ValidationError
        If the title, format description or format version is wrong.
    """
    config = config or DEFAULT_CONFIG
    values = {}
    operation = "Error reading global attribute"
    for name, field, kind, optional in GLOBAL_ATTRIBUTES:
        try:
            value = store.get_global_attr(name, 0, kind)
        except AttributeNotFoundError as e:
            if optional:
                values[field] = None
                continue
            raise StoreError(e.status, operation, name) from e
        except StoreError as e:
            raise StoreError(e.status, operation, name) from e
        values[field] = _decode_field(field, value, name)
    for name, field in INDEXED_GLOBAL_ATTRIBUTES:
        values[field] = read_indexed(store, name, config.max_indexed_entries)
    attrs = GlobalAttributes(**values)
    validate_global_attributes(attrs)
    logger.debug("Read global attributes for %s", attrs.iaga_code)
    return attrs


def _check_element_code(variable):
    code = variable.element_code
    if not code or len(code) > MAX_ELEMENT_CODE_LENGTH:
        raise MissingElementCodeError(code)


def write_variable(store, variable, use_given_depend_0=False):
    """
    Writes a data variable and its metadata.

    The DEPEND_0 written is worked out from the variable type and element
    code, unless ``use_given_depend_0`` is set, in which case the variable's
    own ``depend_0`` is written as it is. A blank given ``depend_0`` is
    refused, since no time stamps could then be found for the variable.

    Returns
    -------
    str
        The DEPEND_0 that was written.

    Raises
    ------
    InvalidVariableTypeError
        If the variable type is not one that can be stored.
    MissingElementCodeError
        If the element code does not map to any time stamp variable, or
        ``use_given_depend_0`` is set and ``depend_0`` is blank.
    StoreError
        Naming the first thing the store would not take.
    """
    var_name = canonical_name(variable.variable_type, variable.element_code)
    _check_element_code(variable)
    if use_given_depend_0:
        if _is_blank(variable.depend_0):
            raise MissingElementCodeError("DEPEND_0 of " + var_name)
        depend_0 = variable.depend_0
    else:
        depend_0 = depend_0_name(variable.variable_type, variable.element_code)

    try:
        store.append_array(var_name, variable.data, Kind.DOUBLE)
    except StoreError as e:
        raise StoreError(e.status, "Error writing variable", var_name) from e

    values = [getattr(variable, field) for _, field, _ in VARIABLE_ATTRIBUTES[:-1]]
    values += [
        depend_0,
        DISPLAY_TYPE,
        axis_label(variable.variable_type, variable.element_code),
    ]
    kinds = [kind for _, _, kind in VARIABLE_ATTRIBUTES] + [Kind.STRING, Kind.STRING]
    for name, value, kind in zip(VARIABLE_ATTRIBUTE_ORDER, values, kinds):
        try:
            store.put_variable_attr(var_name, name, value, kind)
        except StoreError as e:
            raise StoreError(
                e.status,
                "Error writing variable attribute",
                "{}.{}".format(var_name, name),
            ) from e
    logger.debug("Wrote %s (%d values)", var_name, variable.data_length)
    return depend_0


def read_variable(store, var_type, element_code):
    """
    Reads a data variable and its metadata.

    Raises
    ------
    InvalidVariableTypeError
        If ``var_type`` is not one that can be stored.
    VariableNotFoundError
        If the variable is not in the file.
    StoreError
        If an attribute is missing or the data can't be read.
    """
    var_type = VariableType.parse_or_default(var_type)
    var_name = canonical_name(var_type, element_code)
    values = {}
    for name, field, kind in VARIABLE_ATTRIBUTES:
        try:
            values[field] = store.get_variable_attr(var_name, name, kind)
        except VariableNotFoundError:
            raise
        except StoreError as e:
            raise StoreError(
                e.status,
                "Error reading variable attribute",
                "{}.{}".format(var_name, name),
            ) from e
    try:
        data = store.read_array(var_name, Kind.DOUBLE)
    except StoreError as e:
        raise StoreError(e.status, "Error reading variable data", var_name) from e
    logger.debug("Read %s (%d values)", var_name, len(data))
    return Variable(var_type, element_code, data=data, **values)


def write_time_series(store, series):
    """
    Writes time stamps, creating the variable on first use.

    Time stamps that are not strictly increasing are written anyway, with a
    warning.
    """
    name = series.store_variable_name
    if series.length and not is_strictly_increasing(series.timestamps):
        report_status(Status.TIME_STAMPS_NOT_INCREASING, "Writing time stamps", name)
    try:
        store.append_array(name, series.timestamps, Kind.TIMESTAMP)
    except StoreError as e:
        raise StoreError(e.status, "Error writing time stamps", name) from e
    logger.debug("Wrote %s (%d time stamps)", name, series.length)


def read_time_series(store, name):
    try:
        timestamps = store.read_array(name, Kind.TIMESTAMP)
    except VariableNotFoundError:
        raise
    except StoreError as e:
        raise StoreError(e.status, "Error reading time stamps", name) from e
    return TimestampSeries(name, timestamps)


def variable_exists(store, name):
    return store.has_variable(name)


def read_geomagnetic_variables(store, attrs):
    """Reads one variable for each element in ``attrs.elements_recorded``."""
    return [
        read_variable(store, VariableType.GEOMAGNETIC_FIELD_ELEMENT, code)
        for code in elements_in(attrs.elements_recorded)
    ]


def read_temperatures(store, max_variables=None):
    """
    Reads ``Temperature1``, ``Temperature2``, ... up to the first missing one.
    """
    if max_variables is None:
        max_variables = DEFAULT_CONFIG.max_indexed_entries
    temperatures = []
    for number in range(1, max_variables + 1):
        code = str(number)
        if not variable_exists(store, canonical_name(VariableType.TEMPERATURE, code)):
            break
        temperatures.append(read_variable(store, VariableType.TEMPERATURE, code))
    return temperatures


def read_time_series_for(store, variables):
    """Reads each distinct time stamp variable named by ``variables``."""
    series = {}
    for variable in variables:
        name = variable.depend_0
        if _is_blank(name):
            raise ImagCDFError("Variable has no DEPEND_0", variable.name)
        if name not in series:
            series[name] = read_time_series(store, name)
    return series
