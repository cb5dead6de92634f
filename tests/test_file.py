"""tests the ImagCDF file interface"""
import logging

import numpy as np
import pytest

import imagcdf
from imagcdf.file import ImagCDFFile, State
from imagcdf.store import HandleRegistry


def test_write_read(tmp_path, registry, global_attrs, vector_times, make_variable):
    fname = tmp_path / "example.h5"
    scalar_times = imagcdf.TimestampSeries(
        imagcdf.SCALAR_TIMES_NAME, imagcdf.make_series((2020, 1, 1, 0, 0, 0), 60, 5)
    )
    temp_times = imagcdf.TimestampSeries(
        "Temperature1Times", imagcdf.make_series((2020, 1, 1, 0, 0, 0), 3600, 2)
    )
    with imagcdf.open(fname, "force_create", registry=registry) as f:
        f.write_global_attributes(global_attrs)
        for code in "HDZS":
            f.write_variable(make_variable(code))
        f.write_variable(make_variable("1", imagcdf.VariableType.TEMPERATURE, n=2))
        for series in (vector_times, scalar_times, temp_times):
            f.write_time_series(series)
    assert len(registry) == 0

    with imagcdf.open(fname, "read", registry=registry) as f:
        contents = f.read_all()

    assert contents.global_attributes.iaga_code == "ESK"
    assert [v.name for v in contents.variables] == [
        "GeomagneticFieldH",
        "GeomagneticFieldD",
        "GeomagneticFieldZ",
        "GeomagneticFieldS",
        "Temperature1",
    ]
    assert set(contents.time_series) == {
        "GeomagneticVectorTimes",
        "GeomagneticScalarTimes",
        "Temperature1Times",
    }
    for variable in contents.variables:
        assert contents.time_series[variable.depend_0].length == variable.data_length
    np.testing.assert_array_equal(
        contents.time_series["GeomagneticVectorTimes"].timestamps,
        vector_times.timestamps,
    )


def test_write_all_read_all(tmp_path, registry, global_attrs, vector_times, make_variable):
    fname = tmp_path / "example.h5"
    attrs = global_attrs.copy(elements_recorded="XY")
    contents = imagcdf.Contents(
        attrs,
        [make_variable("X"), make_variable("Y")],
        {vector_times.store_variable_name: vector_times},
    )
    with imagcdf.open(fname, "create", registry=registry) as f:
        written = f.write_all(contents)
    assert written.title == "Geomagnetic time series data"

    with imagcdf.open(fname, registry=registry) as f:
        read = f.read_all()
    assert read.global_attributes == written
    assert [v.element_code for v in read.variables] == ["X", "Y"]


def test_states(tmp_path, registry, global_attrs):
    fname = tmp_path / "example.h5"
    f = ImagCDFFile(fname, "force_create", registry=registry)
    assert f.closed and f.state is State.CLOSED
    with f:
        assert f.state is State.CREATED
        f.write_global_attributes(global_attrs)
        assert f.state is State.GLOBAL_ATTRS_WRITTEN
    assert f.state is State.CLOSED

    with ImagCDFFile(fname, "read", registry=registry) as f:
        assert f.state is State.OPENED
        f.read_global_attributes()
        assert f.state is State.DISCOVERABLE


def test_out_of_order_is_logged(tmp_path, registry, global_attrs, make_variable, caplog):
    fname = tmp_path / "example.h5"
    with caplog.at_level(logging.WARNING, logger="imagcdf.file"):
        with imagcdf.open(fname, "force_create", registry=registry) as f:
            f.write_variable(make_variable("H"))
            f.write_global_attributes(global_attrs.copy(elements_recorded="H"))
        assert "before the global attributes" in caplog.text
        caplog.clear()

        with imagcdf.open(fname, "read", registry=registry) as f:
            variable = f.read_variable("GeomagneticFieldElement", "H")
        assert variable.units == "nT"
        assert "before the global attributes" in caplog.text


def test_failed_open_keeps_slot_free(tmp_path):
    registry = HandleRegistry(capacity=1)
    with pytest.raises(imagcdf.StoreError):
        imagcdf.open(tmp_path / "missing.h5", registry=registry)
    assert len(registry) == 0
    with imagcdf.open(tmp_path / "new.h5", "force_create", registry=registry) as f:
        assert f.handle == 0


def test_registry_capacity(tmp_path):
    registry = HandleRegistry(capacity=1)
    with imagcdf.open(tmp_path / "a.h5", "force_create", registry=registry):
        with pytest.raises(imagcdf.CapacityExceededError):
            imagcdf.open(tmp_path / "b.h5", "force_create", registry=registry)


def test_compression_from_config(tmp_path, registry):
    config = imagcdf.Config(compression="gzip4")
    with imagcdf.open(tmp_path / "a.h5", "force_create", registry=registry, config=config) as f:
        assert f.store.compression is imagcdf.Compression.GZIP4


def test_default_registry(tmp_path):
    f = imagcdf.open(tmp_path / "a.h5", "force_create")
    try:
        assert imagcdf.default_registry.get(f.handle) is f.store
    finally:
        f.close()


def test_open_file_close_file(tmp_path, global_attrs):
    fname = tmp_path / "a.h5"
    handle = imagcdf.open_file(fname, "force_create", "gzip2")
    try:
        store = imagcdf.default_registry.get(handle)
        assert store.compression is imagcdf.Compression.GZIP2
        imagcdf.write_global_attributes(store, global_attrs)
    finally:
        imagcdf.close_file(handle)
    with pytest.raises(imagcdf.StoreError) as info:
        imagcdf.default_registry.get(handle)
    assert info.value.status is imagcdf.Status.BAD_HANDLE

    handle = imagcdf.open_file(fname, imagcdf.OpenType.READ)
    try:
        attrs = imagcdf.read_global_attributes(imagcdf.default_registry.get(handle))
        assert attrs.iaga_code == "ESK"
    finally:
        imagcdf.close_file(handle)
