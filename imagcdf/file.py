"""The ImagCDF file interface"""
import enum
import logging

from . import mapper
from .config import DEFAULT_CONFIG
from .model import Contents
from .store import Compression, HandleRegistry, OpenType

logger = logging.getLogger(__name__)

default_registry = HandleRegistry(DEFAULT_CONFIG.max_open_files)


class State(enum.Enum):
    CLOSED = "closed"
    CREATED = "created"
    OPENED = "opened"
    GLOBAL_ATTRS_WRITTEN = "global attributes written"
    DISCOVERABLE = "global attributes read"


class ImagCDFFile:
    """
    An ImagCDF file held open through a :class:`~imagcdf.store.HandleRegistry`.

    Write the global attributes before any variable, and read them before
    reading any variable. Going out of order works, but is logged as a
    warning because other readers rely on it.

    Examples
    --------
    >>> f = ImagCDFFile(temp_h5, "force_create")
    >>> with f:
    ...     f.state
    <State.CREATED: 'created'>
    >>> f.state
    <State.CLOSED: 'closed'>
    """

    def __init__(
        self,
        filename,
        open_type=OpenType.OPEN,
        compression=None,
        registry=None,
        config=None,
    ):
        self.filename = filename
        self.config = config or DEFAULT_CONFIG
        self.open_type = OpenType(open_type)
        self.compression = Compression(
            compression if compression is not None else self.config.compression
        )
        self._registry = registry if registry is not None else default_registry
        self.handle = None
        self.state = State.CLOSED

    @property
    def closed(self):
        return self.handle is None

    @property
    def store(self):
        return self._registry.get(self.handle)

    def open(self):
        if not self.closed:
            return
        self.handle = self._registry.open(
            self.filename, self.open_type, self.compression
        )
        if self.open_type in (OpenType.FORCE_CREATE, OpenType.CREATE):
            self.state = State.CREATED
        else:
            self.state = State.OPENED

    def close(self):
        """Close the file. Files that were written are corrupt until closed."""
        if self.closed:
            return
        handle, self.handle = self.handle, None
        self.state = State.CLOSED
        self._registry.close(handle)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _check_order(self, action, ready_state):
        if self.state is not ready_state:
            logger.warning(
                "%s in %s before the global attributes (file is %s)",
                action,
                self.filename,
                self.state.value,
            )

    def write_global_attributes(self, attrs):
        written = mapper.write_global_attributes(self.store, attrs, self.config)
        self.state = State.GLOBAL_ATTRS_WRITTEN
        return written

    def read_global_attributes(self):
        attrs = mapper.read_global_attributes(self.store, self.config)
        self.state = State.DISCOVERABLE
        return attrs

    def write_variable(self, variable, use_given_depend_0=False):
        self._check_order("Writing " + variable.name, State.GLOBAL_ATTRS_WRITTEN)
        return mapper.write_variable(self.store, variable, use_given_depend_0)

    def write_time_series(self, series):
        self._check_order(
            "Writing " + series.store_variable_name, State.GLOBAL_ATTRS_WRITTEN
        )
        mapper.write_time_series(self.store, series)

    def read_variable(self, var_type, element_code):
        self._check_order("Reading a variable", State.DISCOVERABLE)
        return mapper.read_variable(self.store, var_type, element_code)

    def read_time_series(self, name):
        self._check_order("Reading " + name, State.DISCOVERABLE)
        return mapper.read_time_series(self.store, name)

    def variable_exists(self, name):
        return mapper.variable_exists(self.store, name)

    def read_temperatures(self):
        self._check_order("Reading temperatures", State.DISCOVERABLE)
        return mapper.read_temperatures(self.store, self.config.max_indexed_entries)

    def write_all(self, contents, use_given_depend_0=False):
        """
        Writes global attributes, then variables, then time stamps.

        Returns the global attributes as written.
        """
        attrs = self.write_global_attributes(contents.global_attributes)
        for variable in contents.variables:
            self.write_variable(variable, use_given_depend_0)
        for series in contents.time_series.values():
            self.write_time_series(series)
        return attrs

    def read_all(self):
        """
        Reads everything in the file.

        The global attributes are read first; then a variable for each
        recorded element, then every temperature, then each time stamp
        variable they depend on.
        """
        attrs = self.read_global_attributes()
        variables = mapper.read_geomagnetic_variables(self.store, attrs)
        variables += self.read_temperatures()
        series = mapper.read_time_series_for(self.store, variables)
        return Contents(attrs, variables, series)


def open(filename, open_type=OpenType.OPEN, compression=None, registry=None, config=None):
    """Opens an ImagCDF file."""
    f = ImagCDFFile(filename, open_type, compression, registry, config)
    f.open()
    return f


def open_file(filename, open_type=OpenType.OPEN, compression=Compression.NONE):
    """
    Opens a store in the default registry and returns its handle.

    >>> handle = open_file(temp_h5, "force_create")
    >>> default_registry.get(handle).has_variable("GeomagneticFieldH")
    False
    >>> close_file(handle)
    """
    return default_registry.open(filename, OpenType(open_type), Compression(compression))


def close_file(handle):
    """Closes a handle returned by :func:`open_file`."""
    default_registry.close(handle)
