"""
Geomagnetic observatory data in the INTERMAGNET ImagCDF format.

Model
-----

An ImagCDF file holds:

* *Global attributes* describing the whole file: the observatory, which
  elements were recorded, the publication level and so on. Three of them are
  fixed: ``Title`` is ``Geomagnetic time series data``, ``FormatDescription``
  is ``INTERMAGNET CDF Format`` and ``FormatVersion`` is one of ``1.1``,
  ``1.2`` or ``1.3``.
* *Data variables*, one per recorded channel, named ``GeomagneticField<code>``
  for a geomagnetic element (H, D, Z, X, Y, E, V, I, F, S or G) or
  ``Temperature<n>`` for a temperature. Each carries the variable attributes
  FIELDNAM, UNITS, FILLVAL, VALIDMIN, VALIDMAX, DEPEND_0, DISPLAY_TYPE and
  LABLAXIS.
* *Time stamp variables*. Vector elements share ``GeomagneticVectorTimes``,
  scalar elements (S, G) share ``GeomagneticScalarTimes`` and each
  temperature has its own ``Temperature<n>Times``. A data variable's DEPEND_0
  names its time stamp variable.

Time stamps are integer nanoseconds since 1970 (see :mod:`imagcdf.times`).
The file itself is kept in HDF5 through h5py (see :mod:`imagcdf.store`).

Quickstart API
--------------

>>> attrs = imagcdf.GlobalAttributes(
...     iaga_code="ESK", elements_recorded="HDZ", observatory_name="Eskdalemuir",
...     latitude=55.314, longitude=356.794, elevation=245.0,
...     institution="BGS", source="INTERMAGNET",
...     publication_date=imagcdf.civil_to_instant(2020, 2, 1))
>>> times = imagcdf.TimestampSeries(
...     imagcdf.VECTOR_TIMES_NAME, imagcdf.make_series((2020, 1, 1, 0, 0, 0), 60, 3))
>>> with imagcdf.open(temp_h5, "force_create") as f:
...     _ = f.write_global_attributes(attrs)
...     for code in "HDZ":
...         _ = f.write_variable(imagcdf.Variable(
...             "GeomagneticFieldElement", code, [1.0, 2.0, 3.0], units="nT"))
...     f.write_time_series(times)
>>> with imagcdf.open(temp_h5, "read") as f:
...     contents = f.read_all()
>>> contents.global_attributes.title
'Geomagnetic time series data'
>>> [v.name for v in contents.variables]
['GeomagneticFieldH', 'GeomagneticFieldD', 'GeomagneticFieldZ']
>>> list(contents.time_series)
['GeomagneticVectorTimes']
"""

from .config import DEFAULT_CONFIG, Config, load_config
from .errors import (
    AttributeNotFoundError,
    CapacityExceededError,
    ImagCDFError,
    InvalidDateTimeError,
    InvalidVariableTypeError,
    MissingElementCodeError,
    Severity,
    Status,
    StoreError,
    UnrecognizedValueError,
    ValidationError,
    VariableNotFoundError,
    describe_status,
    format_error,
)
from .file import ImagCDFFile, close_file, default_registry, open, open_file
from .filename import Interval, build_filename, cadence_from_sample_period
from .mapper import (
    read_global_attributes,
    read_temperatures,
    read_time_series,
    read_variable,
    variable_exists,
    with_defaults,
    write_global_attributes,
    write_time_series,
    write_variable,
)
from .model import Contents, GlobalAttributes, TimestampSeries, Variable
from .schema import (
    SCALAR_TIMES_NAME,
    VECTOR_TIMES_NAME,
    ElementClass,
    PublicationLevel,
    StandardLevel,
    VariableType,
    canonical_name,
    classify_element,
    depend_0_name,
    elements_in,
    publication_level_from_data_type,
)
from .store import Compression, H5Store, HandleRegistry, Kind, OpenType, Store
from .terms import INTERMAGNET_TERMS_OF_USE
from .times import (
    civil_to_instant,
    format_instant,
    increment,
    instant_to_civil,
    make_series,
    sample_period,
)

__version__ = "0.1.0"
