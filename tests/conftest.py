import numpy as np
import pytest

import imagcdf
from imagcdf.store import HandleRegistry


@pytest.fixture
def registry():
    reg = HandleRegistry(capacity=4)
    yield reg
    reg.close_all()


@pytest.fixture
def global_attrs():
    return imagcdf.GlobalAttributes(
        iaga_code="ESK",
        elements_recorded="HDZS",
        publication_level=imagcdf.PublicationLevel.LEVEL_2,
        publication_date=imagcdf.civil_to_instant(2020, 2, 1, 12, 0, 0),
        observatory_name="Eskdalemuir",
        latitude=55.314,
        longitude=356.794,
        elevation=245.0,
        institution="British Geological Survey",
        vector_sensor_orientation="HDZ",
        standard_level=imagcdf.StandardLevel.PARTIAL,
        standard_name="INTERMAGNET_1-Minute",
        standard_version="1.0",
        partial_standard_description="IMOS-01,IMOS-02",
        source="INTERMAGNET",
        unique_identifier="doi:10.0000/esk-2020",
        parent_identifiers=["esk-2019", "esk-2018"],
        reference_links=["https://www.intermagnet.org", "https://geomag.bgs.ac.uk"],
    )


@pytest.fixture
def vector_times():
    return imagcdf.TimestampSeries(
        imagcdf.VECTOR_TIMES_NAME, imagcdf.make_series((2020, 1, 1, 0, 0, 0), 60, 5)
    )


def _make_variable(code, var_type=imagcdf.VariableType.GEOMAGNETIC_FIELD_ELEMENT, n=5):
    return imagcdf.Variable(
        var_type,
        code,
        data=np.linspace(-10.5, 20.25, n),
        field_name="Geomagnetic Field Element " + code,
        units="nT",
        fill_value=99999.0,
        valid_min=-88880.0,
        valid_max=88880.0,
    )


@pytest.fixture
def make_variable():
    return _make_variable
