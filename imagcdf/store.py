"""
The typed attribute/variable store underneath ImagCDF, kept in HDF5 (h5py).

Layout
------

* Global attributes live on the root group. Entry 0 of an attribute is
  stored under the attribute's own name, entry ``n > 0`` under ``Name[n]``.
* Each data or time stamp variable is a one dimensional dataset, extensible
  along its single axis (``maxshape=(None,)``). Data is ``float64``, time
  stamps are ``int64`` nanoseconds (see :mod:`imagcdf.times`).
* Variable attributes are attributes of the dataset.

Values are typed by :class:`Kind`: strings are stored as strings, doubles as
``float64`` and time stamps as ``int64``, so the type can be checked on read.

>>> with H5Store(temp_h5, OpenType.FORCE_CREATE) as store:
...     store.put_global_attr("IagaCode", 0, "ESK", Kind.STRING)
...     store.append_array("GeomagneticFieldH", [1.0, 2.0], Kind.DOUBLE)
>>> with H5Store(temp_h5, OpenType.READ) as store:
...     store.get_global_attr("IagaCode", 0, Kind.STRING)
...     store.read_array("GeomagneticFieldH", Kind.DOUBLE)
'ESK'
array([1., 2.])
"""
import abc
import enum
import logging
import os

import h5py
import numpy as np

from .errors import (
    AttributeNotFoundError,
    CapacityExceededError,
    Status,
    StoreError,
    VariableNotFoundError,
    report_status,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_OPEN_FILES = 10


class Kind(enum.Enum):
    """The type of an attribute entry or variable."""

    STRING = "string"
    DOUBLE = "double"
    TIMESTAMP = "timestamp"


_ARRAY_DTYPES = {
    Kind.DOUBLE: np.dtype("<f8"),
    Kind.TIMESTAMP: np.dtype("<i8"),
}


class OpenType(enum.Enum):
    """
    How to open a file.

    ``force_create`` deletes an existing file first, ``create`` refuses to
    touch an existing file, ``open`` needs an existing file and allows
    writing, ``read`` needs an existing file and is read-only.
    """

    FORCE_CREATE = "force_create"
    CREATE = "create"
    OPEN = "open"
    READ = "read"


class Compression(enum.Enum):
    NONE = "none"
    GZIP1 = "gzip1"
    GZIP2 = "gzip2"
    GZIP3 = "gzip3"
    GZIP4 = "gzip4"
    GZIP5 = "gzip5"
    GZIP6 = "gzip6"
    GZIP7 = "gzip7"
    GZIP8 = "gzip8"
    GZIP9 = "gzip9"

    @property
    def dataset_options(self):
        """Keyword arguments for ``create_dataset``."""
        if self is Compression.NONE:
            return {}
        return {"compression": "gzip", "compression_opts": int(self.value[4:])}


def _entry_key(name, index):
    """
    The HDF5 attribute name holding one entry of a global attribute.

    >>> _entry_key("ParentIdentifiers", 0)
    'ParentIdentifiers'
    >>> _entry_key("ParentIdentifiers", 2)
    'ParentIdentifiers[2]'
    """
    if index < 0:
        raise StoreError(Status.BAD_ARGUMENT, "Negative attribute entry", name)
    return name if index == 0 else "{}[{}]".format(name, index)


def _encode(value, kind):
    if kind is Kind.STRING:
        return str(value)
    elif kind is Kind.DOUBLE:
        return np.float64(value)
    return np.int64(value)


def _decode(value, kind, operation, name):
    if kind is Kind.STRING:
        if isinstance(value, bytes):
            return value.decode("utf-8")
        if isinstance(value, str):
            return value
    else:
        dtype = getattr(value, "dtype", None)
        expected = _ARRAY_DTYPES[kind].kind
        if dtype is not None and dtype.kind == expected and dtype.shape == ():
            return float(value) if kind is Kind.DOUBLE else int(value)
    raise StoreError(Status.ATTR_TYPE_MISMATCH, operation, name)


class Store(abc.ABC):
    """
    The primitives ImagCDF is mapped onto.

    Every failure is raised as a :class:`~imagcdf.errors.StoreError`; a
    missing attribute entry as :class:`~imagcdf.errors.AttributeNotFoundError`
    and a missing variable as :class:`~imagcdf.errors.VariableNotFoundError`.
    """

    @abc.abstractmethod
    def close(self):
        pass

    @abc.abstractmethod
    def put_global_attr(self, name, index, value, kind):
        pass

    @abc.abstractmethod
    def get_global_attr(self, name, index, kind):
        pass

    @abc.abstractmethod
    def delete_global_attr(self, name):
        """Removes every entry of a global attribute, if there are any."""

    @abc.abstractmethod
    def put_variable_attr(self, var_name, name, value, kind):
        pass

    @abc.abstractmethod
    def get_variable_attr(self, var_name, name, kind):
        pass

    @abc.abstractmethod
    def append_array(self, var_name, values, kind):
        """Appends to a variable, creating it on first use."""

    @abc.abstractmethod
    def read_array(self, var_name, kind):
        pass

    @abc.abstractmethod
    def has_variable(self, var_name):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class H5Store(Store):
    """
    A :class:`Store` kept in an HDF5 file.

    Parameters
    ----------
    filename : str or path-like
        The file on disk.
    open_type : OpenType or str
        How to open the file.
    compression : Compression or str
        Compression for datasets. Only used on files that are being created.
    """

    def __init__(self, filename, open_type=OpenType.OPEN, compression=Compression.NONE):
        self.filename = os.fspath(filename)
        self.open_type = OpenType(open_type)
        self.compression = Compression(compression)
        self.closed = True
        self._handle = None
        self._writable = self.open_type is not OpenType.READ
        if self.open_type in (OpenType.OPEN, OpenType.READ):
            if self.compression is not Compression.NONE:
                report_status(Status.COMPRESSION_IGNORED, "Opening", self.filename)
            self.compression = Compression.NONE
        self._open()

    def _open(self):
        exists = os.path.exists(self.filename)
        if self.open_type is OpenType.FORCE_CREATE:
            if exists:
                os.remove(self.filename)
            mode = "w"
        elif self.open_type is OpenType.CREATE:
            if exists:
                raise StoreError(Status.FILE_EXISTS, "Error creating file", self.filename)
            mode = "w-"
        else:
            if not exists:
                raise StoreError(Status.NO_SUCH_FILE, "Error opening file", self.filename)
            mode = "r" if self.open_type is OpenType.READ else "r+"
        try:
            self._handle = h5py.File(self.filename, mode)
        except OSError as e:
            raise StoreError(Status.IO_ERROR, "Error opening file", self.filename) from e
        self.closed = False
        logger.info("Opened %s (%s)", self.filename, self.open_type.value)

    def close(self):
        """Close the file. Files that were written are corrupt until closed."""
        if self.closed:
            return
        try:
            self._handle.close()
        except (OSError, RuntimeError) as e:
            raise StoreError(Status.IO_ERROR, "Error closing file", self.filename) from e
        finally:
            self._handle = None
            self.closed = True
        logger.info("Closed %s", self.filename)

    @property
    def _root(self):
        if self.closed:
            raise StoreError(Status.FILE_CLOSED, "File is not open", self.filename)
        return self._handle["/"]

    def _check_writable(self, operation, name):
        if not self._writable:
            raise StoreError(Status.READ_ONLY, operation, name)

    def _dataset(self, var_name, operation):
        root = self._root
        if var_name not in root:
            raise VariableNotFoundError(Status.NO_SUCH_VAR, operation, var_name)
        return root[var_name]

    def put_global_attr(self, name, index, value, kind):
        operation = "Error writing global attribute"
        self._check_writable(operation, name)
        key = _entry_key(name, index)
        attrs = self._root.attrs
        if key in attrs:
            report_status(Status.ATTR_OVERWRITTEN, "Writing global attribute", key)
        try:
            attrs[key] = _encode(value, kind)
        except (TypeError, ValueError, OSError) as e:
            raise StoreError(Status.IO_ERROR, operation, name) from e

    def get_global_attr(self, name, index, kind):
        operation = "Error reading global attribute"
        key = _entry_key(name, index)
        attrs = self._root.attrs
        if key not in attrs:
            status = Status.NO_SUCH_ENTRY if name in attrs else Status.NO_SUCH_ATTR
            raise AttributeNotFoundError(status, operation, key)
        return _decode(attrs[key], kind, operation, key)

    def delete_global_attr(self, name):
        operation = "Error deleting global attribute"
        self._check_writable(operation, name)
        attrs = self._root.attrs
        entry = name + "["
        keys = [
            key for key in attrs if key == name or (key.startswith(entry) and key.endswith("]"))
        ]
        try:
            for key in keys:
                del attrs[key]
        except (KeyError, OSError) as e:
            raise StoreError(Status.IO_ERROR, operation, name) from e
        if keys:
            logger.debug("Deleted %d entries of %s", len(keys), name)

    def put_variable_attr(self, var_name, name, value, kind):
        operation = "Error writing variable attribute"
        self._check_writable(operation, name)
        dataset = self._dataset(var_name, operation)
        try:
            dataset.attrs[name] = _encode(value, kind)
        except (TypeError, ValueError, OSError) as e:
            raise StoreError(Status.IO_ERROR, operation, name) from e

    def get_variable_attr(self, var_name, name, kind):
        operation = "Error reading variable attribute"
        attrs = self._dataset(var_name, operation).attrs
        if name not in attrs:
            raise AttributeNotFoundError(
                Status.NO_SUCH_ATTR, operation, "{}.{}".format(var_name, name)
            )
        return _decode(attrs[name], kind, operation, name)

    def append_array(self, var_name, values, kind):
        operation = "Error writing variable"
        self._check_writable(operation, var_name)
        dtype = _ARRAY_DTYPES[kind]
        data = np.asarray(values, dtype=dtype).reshape(-1)
        root = self._root
        try:
            if var_name not in root:
                root.create_dataset(
                    var_name,
                    dtype=dtype,
                    shape=(0,),
                    maxshape=(None,),
                    chunks=True,
                    **self.compression.dataset_options
                )
            ds = root[var_name]
            if ds.dtype != dtype:
                raise StoreError(Status.DATA_TYPE_MISMATCH, operation, var_name)
            n = len(data)
            if n:
                m = ds.len()
                ds.resize((m + n,))
                ds[m:] = data
        except (TypeError, ValueError, OSError) as e:
            raise StoreError(Status.IO_ERROR, operation, var_name) from e
        logger.debug("Appended %d values to %s", len(data), var_name)

    def read_array(self, var_name, kind):
        operation = "Error reading variable"
        ds = self._dataset(var_name, operation)
        if ds.dtype != _ARRAY_DTYPES[kind]:
            raise StoreError(Status.DATA_TYPE_MISMATCH, operation, var_name)
        try:
            return ds[...]
        except OSError as e:
            raise StoreError(Status.IO_ERROR, operation, var_name) from e

    def has_variable(self, var_name):
        return var_name in self._root


class HandleRegistry:
    """
    A fixed size table of open stores, addressed by integer handle.

    Examples
    --------
    >>> registry = HandleRegistry(capacity=1)
    >>> handle = registry.open(temp_h5, OpenType.FORCE_CREATE)
    >>> registry.open(temp_h5, OpenType.OPEN)
    Traceback (most recent call last):
        ...
    imagcdf.errors.CapacityExceededError: Cannot open more than 1 files [store error: Too many files are open]
    >>> registry.close(handle)
    >>> len(registry)
    0
    """

    def __init__(self, capacity=DEFAULT_MAX_OPEN_FILES, factory=H5Store):
        if capacity < 1:
            raise ValueError("capacity must be at least 1, got {}".format(capacity))
        self.capacity = capacity
        self._factory = factory
        self._slots = [None] * capacity

    def __len__(self):
        return sum(store is not None for store in self._slots)

    def open(self, filename, open_type=OpenType.OPEN, compression=Compression.NONE):
        """Opens a store and returns its handle."""
        try:
            handle = self._slots.index(None)
        except ValueError:
            raise CapacityExceededError(self.capacity) from None
        self._slots[handle] = self._factory(filename, open_type, compression)
        return handle

    def get(self, handle):
        if not 0 <= handle < self.capacity or self._slots[handle] is None:
            raise StoreError(Status.BAD_HANDLE, "Unknown handle", handle)
        return self._slots[handle]

    def close(self, handle):
        store = self.get(handle)
        self._slots[handle] = None
        store.close()

    def close_all(self):
        for handle, store in enumerate(self._slots):
            if store is not None:
                self.close(handle)
