"""Value objects passed to and returned from the mapper."""
import dataclasses
from typing import List, Optional

import numpy as np

from .schema import (
    MISSING_DATA_VALUE,
    PublicationLevel,
    StandardLevel,
    VariableType,
    canonical_name,
)
from .times import as_datetime64


@dataclasses.dataclass
class GlobalAttributes:
    """The file-wide ImagCDF metadata."""

    iaga_code: str = ""
    elements_recorded: str = ""
    publication_level: PublicationLevel = PublicationLevel.LEVEL_1
    publication_date: int = 0
    observatory_name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0
    institution: str = ""
    source: str = ""
    standard_level: StandardLevel = StandardLevel.NONE
    format_description: str = ""
    format_version: str = ""
    title: str = ""
    vector_sensor_orientation: Optional[str] = None
    standard_name: Optional[str] = None
    standard_version: Optional[str] = None
    partial_standard_description: Optional[str] = None
    terms_of_use: Optional[str] = None
    unique_identifier: Optional[str] = None
    parent_identifiers: List[str] = dataclasses.field(default_factory=list)
    reference_links: List[str] = dataclasses.field(default_factory=list)

    def copy(self, **changes):
        """A copy with its own lists, with ``changes`` applied."""
        changes.setdefault("parent_identifiers", list(self.parent_identifiers))
        changes.setdefault("reference_links", list(self.reference_links))
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass(eq=False)
class Variable:
    """
    One recorded channel: a geomagnetic element or a temperature.

    ``depend_0`` is only written as given when asked for; normally it is
    worked out from the variable type and element code. A variable type
    given by a name that isn't recognised becomes ``VariableType.ERROR``,
    which can't be written.
    """

    variable_type: VariableType
    element_code: str
    data: np.ndarray = dataclasses.field(default_factory=lambda: np.empty(0))
    field_name: str = ""
    units: str = ""
    fill_value: float = MISSING_DATA_VALUE
    valid_min: float = -MISSING_DATA_VALUE
    valid_max: float = MISSING_DATA_VALUE
    depend_0: Optional[str] = None

    def __post_init__(self):
        self.variable_type = VariableType.parse_or_default(self.variable_type)
        self.data = np.asarray(self.data, dtype=np.float64).reshape(-1)

    @property
    def data_length(self):
        return len(self.data)

    @property
    def name(self):
        """The name this variable is stored under."""
        return canonical_name(self.variable_type, self.element_code)


@dataclasses.dataclass(eq=False)
class TimestampSeries:
    """Time stamps (see :mod:`imagcdf.times`) shared by one or more variables."""

    store_variable_name: str
    timestamps: np.ndarray = dataclasses.field(
        default_factory=lambda: np.empty(0, dtype=np.int64)
    )

    def __post_init__(self):
        self.timestamps = np.asarray(self.timestamps, dtype=np.int64).reshape(-1)

    @property
    def length(self):
        return len(self.timestamps)

    def datetimes(self):
        """The time stamps as ``datetime64[ns]``."""
        return as_datetime64(self.timestamps)


@dataclasses.dataclass
class Contents:
    """Everything read from one file."""

    global_attributes: GlobalAttributes
    variables: List[Variable]
    time_series: dict
