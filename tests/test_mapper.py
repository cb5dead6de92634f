"""tests mapping ImagCDF metadata and variables onto the store"""
import logging

import numpy as np
import pytest

import imagcdf
from imagcdf import mapper
from imagcdf.errors import (
    InvalidVariableTypeError,
    MissingElementCodeError,
    Status,
    StoreError,
    ValidationError,
    VariableNotFoundError,
)
from imagcdf.schema import PublicationLevel, StandardLevel, VariableType
from imagcdf.store import H5Store, Kind, OpenType


@pytest.fixture
def store(tmp_path):
    with H5Store(tmp_path / "example.h5", OpenType.FORCE_CREATE) as s:
        yield s


def test_global_attrs_round_trip(store, global_attrs):
    written = mapper.write_global_attributes(store, global_attrs)
    read = mapper.read_global_attributes(store)

    assert read == written
    assert read.iaga_code == "ESK"
    assert read.publication_level is PublicationLevel.LEVEL_2
    assert read.standard_level is StandardLevel.PARTIAL
    assert read.publication_date == global_attrs.publication_date
    assert read.latitude == 55.314
    assert read.parent_identifiers == ["esk-2019", "esk-2018"]
    assert read.reference_links == [
        "https://www.intermagnet.org",
        "https://geomag.bgs.ac.uk",
    ]


def test_defaults_applied_without_mutation(store, global_attrs):
    written = mapper.write_global_attributes(store, global_attrs)

    assert global_attrs.title == ""
    assert global_attrs.terms_of_use is None
    assert written.title == "Geomagnetic time series data"
    assert written.format_description == "INTERMAGNET CDF Format"
    assert written.format_version == "1.3"
    assert written.terms_of_use == imagcdf.INTERMAGNET_TERMS_OF_USE

    read = mapper.read_global_attributes(store)
    assert read.terms_of_use == imagcdf.INTERMAGNET_TERMS_OF_USE


def test_given_values_are_kept(store, global_attrs):
    attrs = global_attrs.copy(format_version="1.1", terms_of_use="Free to use")
    mapper.write_global_attributes(store, attrs)
    read = mapper.read_global_attributes(store)
    assert read.format_version == "1.1"
    assert read.terms_of_use == "Free to use"


def test_optional_attrs_absent(store):
    attrs = imagcdf.GlobalAttributes(iaga_code="ABC", elements_recorded="XYZ")
    mapper.write_global_attributes(store, attrs)
    read = mapper.read_global_attributes(store)

    assert read.vector_sensor_orientation is None
    assert read.standard_name is None
    assert read.standard_version is None
    assert read.partial_standard_description is None
    assert read.unique_identifier is None
    assert read.parent_identifiers == []
    assert read.reference_links == []


def test_rewrite_replaces_global_attrs(tmp_path, global_attrs):
    fname = tmp_path / "example.h5"
    with H5Store(fname, OpenType.FORCE_CREATE) as store:
        mapper.write_global_attributes(store, global_attrs)

    changed = global_attrs.copy(
        parent_identifiers=["only"], reference_links=[], unique_identifier=None
    )
    with H5Store(fname, OpenType.OPEN) as store:
        written = mapper.write_global_attributes(store, changed)

    with H5Store(fname, OpenType.READ) as store:
        read = mapper.read_global_attributes(store)
    assert read == written
    assert read.parent_identifiers == ["only"]
    assert read.reference_links == []
    assert read.unique_identifier is None


def test_required_attr_missing(store, global_attrs):
    mapper.write_global_attributes(store, global_attrs)
    del store._handle["/"].attrs["Institution"]
    with pytest.raises(StoreError) as info:
        mapper.read_global_attributes(store)
    assert info.value.parameter == "Institution"
    assert info.value.status is Status.NO_SUCH_ATTR


@pytest.mark.parametrize(
    "name, value",
    [
        ("Title", "Some other data"),
        ("FormatDescription", "NetCDF"),
        ("FormatVersion", "1.0"),
        ("FormatVersion", "1.4"),
        ("FormatVersion", "abc"),
    ],
)
def test_validation(store, global_attrs, name, value):
    mapper.write_global_attributes(store, global_attrs)
    store.put_global_attr(name, 0, value, Kind.STRING)
    with pytest.raises(ValidationError) as info:
        mapper.read_global_attributes(store)
    assert info.value.field == name
    assert info.value.value == value


def test_validation_ignores_case(store, global_attrs):
    attrs = global_attrs.copy(
        title="GEOMAGNETIC TIME SERIES DATA", format_description="intermagnet cdf format"
    )
    mapper.write_global_attributes(store, attrs)
    assert mapper.read_global_attributes(store).title == "GEOMAGNETIC TIME SERIES DATA"


@pytest.mark.parametrize("version", ["1.1", "1.2", "1.3", "1.10"])
def test_supported_versions(version):
    assert mapper.is_supported_version(version)


def test_unknown_levels_default_with_warning(store, global_attrs, caplog):
    mapper.write_global_attributes(store, global_attrs)
    store.put_global_attr("PublicationLevel", 0, "9", Kind.STRING)
    store.put_global_attr("StandardLevel", 0, "Mostly", Kind.STRING)
    with caplog.at_level(logging.WARNING):
        read = mapper.read_global_attributes(store)
    assert read.publication_level is PublicationLevel.LEVEL_1
    assert read.standard_level is StandardLevel.NONE
    assert len(caplog.records) == 2


def test_indexed_probe_is_capped(store):
    for i in range(4):
        store.put_global_attr("ParentIdentifiers", i, str(i), Kind.STRING)
    assert mapper.read_indexed(store, "ParentIdentifiers", 4) == ["0", "1", "2", "3"]
    with pytest.raises(StoreError) as info:
        mapper.read_indexed(store, "ParentIdentifiers", 3)
    assert info.value.status is Status.TOO_MANY_ENTRIES


def test_indexed_empty(store):
    assert mapper.read_indexed(store, "ParentIdentifiers") == []


def test_write_global_attrs_fails_on_first_field(tmp_path, global_attrs):
    fname = tmp_path / "example.h5"
    H5Store(fname, OpenType.FORCE_CREATE).close()
    with H5Store(fname, OpenType.READ) as store:
        with pytest.raises(StoreError) as info:
            mapper.write_global_attributes(store, global_attrs)
    assert info.value.parameter == "FormatDescription"
    assert info.value.status is Status.READ_ONLY


@pytest.mark.parametrize(
    "var_type, code, depend_0",
    [
        (VariableType.GEOMAGNETIC_FIELD_ELEMENT, "H", "GeomagneticVectorTimes"),
        (VariableType.GEOMAGNETIC_FIELD_ELEMENT, "F", "GeomagneticVectorTimes"),
        (VariableType.GEOMAGNETIC_FIELD_ELEMENT, "S", "GeomagneticScalarTimes"),
        (VariableType.TEMPERATURE, "1", "Temperature1Times"),
    ],
)
def test_variable_round_trip(store, make_variable, var_type, code, depend_0):
    variable = make_variable(code, var_type)
    assert mapper.write_variable(store, variable) == depend_0

    read = mapper.read_variable(store, var_type, code)
    assert read.variable_type is var_type
    assert read.element_code == code
    assert read.field_name == variable.field_name
    assert read.units == "nT"
    assert read.fill_value == 99999.0
    assert read.valid_min == -88880.0
    assert read.valid_max == 88880.0
    assert read.depend_0 == depend_0
    assert read.data_length == 5
    assert read.data.tobytes() == variable.data.tobytes()


def test_variable_attrs_written(store, make_variable):
    mapper.write_variable(store, make_variable("1", VariableType.TEMPERATURE))
    attrs = store._handle["/Temperature1"].attrs
    assert set(attrs) == set(mapper.VARIABLE_ATTRIBUTE_ORDER)
    assert attrs["DISPLAY_TYPE"] == "time_series"
    assert attrs["LABLAXIS"] == "Temperature 1"

    mapper.write_variable(store, make_variable("Z"))
    assert store._handle["/GeomagneticFieldZ"].attrs["LABLAXIS"] == "Z"


def test_given_depend_0(store, make_variable):
    variable = make_variable("X")
    variable.depend_0 = "MyTimes"
    assert mapper.write_variable(store, variable, use_given_depend_0=True) == "MyTimes"
    read = mapper.read_variable(store, VariableType.GEOMAGNETIC_FIELD_ELEMENT, "X")
    assert read.depend_0 == "MyTimes"

    assert mapper.write_variable(store, make_variable("Y")) == "GeomagneticVectorTimes"

    with pytest.raises(MissingElementCodeError):
        mapper.write_variable(store, make_variable("Z"), use_given_depend_0=True)


def test_invalid_variables(store, make_variable):
    with pytest.raises(InvalidVariableTypeError):
        mapper.write_variable(store, make_variable("H", VariableType.ERROR))
    with pytest.raises(MissingElementCodeError):
        mapper.write_variable(store, make_variable("Q"))
    with pytest.raises(MissingElementCodeError):
        mapper.write_variable(store, make_variable("1234567890", VariableType.TEMPERATURE))
    assert not store.has_variable("GeomagneticFieldQ")
    with pytest.raises(InvalidVariableTypeError):
        mapper.read_variable(store, VariableType.ERROR, "H")


def test_variable_type_names(store, make_variable):
    variable = make_variable("S", "GeomagneticFieldElement")
    assert variable.variable_type is VariableType.GEOMAGNETIC_FIELD_ELEMENT
    assert mapper.write_variable(store, variable) == "GeomagneticScalarTimes"

    read = mapper.read_variable(store, "GeomagneticFieldElement", "S")
    assert read.variable_type is VariableType.GEOMAGNETIC_FIELD_ELEMENT
    np.testing.assert_array_equal(read.data, variable.data)

    with pytest.raises(InvalidVariableTypeError):
        mapper.read_variable(store, "Bogus", "H")
    bogus = make_variable("H", "Bogus")
    assert bogus.variable_type is VariableType.ERROR
    with pytest.raises(InvalidVariableTypeError):
        mapper.write_variable(store, bogus)


def test_read_missing_variable(store, make_variable):
    with pytest.raises(VariableNotFoundError):
        mapper.read_variable(store, VariableType.GEOMAGNETIC_FIELD_ELEMENT, "H")
    store.append_array("GeomagneticFieldD", [1.0], Kind.DOUBLE)
    with pytest.raises(StoreError) as info:
        mapper.read_variable(store, VariableType.GEOMAGNETIC_FIELD_ELEMENT, "D")
    assert info.value.parameter == "GeomagneticFieldD.FIELDNAM"


def test_time_series_round_trip(store, vector_times):
    mapper.write_time_series(store, vector_times)
    read = mapper.read_time_series(store, imagcdf.VECTOR_TIMES_NAME)
    assert read.store_variable_name == imagcdf.VECTOR_TIMES_NAME
    assert read.length == 5
    np.testing.assert_array_equal(read.timestamps, vector_times.timestamps)
    assert imagcdf.sample_period(read.timestamps) == 60


def test_time_series_not_increasing(store, caplog):
    series = imagcdf.TimestampSeries("GeomagneticScalarTimes", [3, 2, 1])
    with caplog.at_level(logging.WARNING):
        mapper.write_time_series(store, series)
    assert "not strictly increasing" in caplog.text
    np.testing.assert_array_equal(
        mapper.read_time_series(store, "GeomagneticScalarTimes").timestamps, [3, 2, 1]
    )


def test_read_missing_time_series(store):
    with pytest.raises(VariableNotFoundError):
        mapper.read_time_series(store, "Temperature1Times")


def test_read_temperatures(store, make_variable):
    for code in "123":
        mapper.write_variable(store, make_variable(code, VariableType.TEMPERATURE))
    mapper.write_variable(store, make_variable("5", VariableType.TEMPERATURE))
    temperatures = mapper.read_temperatures(store)
    assert [t.element_code for t in temperatures] == ["1", "2", "3"]
    assert mapper.variable_exists(store, "Temperature5")
