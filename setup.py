#!/usr/bin/env python3
import os
import sys

from setuptools import setup


def main():
    """The main entry point."""
    if sys.version_info[:2] < (3, 8):
        sys.exit("imagcdf currently requires Python 3.8+")
    with open(os.path.join(os.path.dirname(__file__), "README.md"), "r") as f:
        readme = f.read()
    skw = dict(
        name="imagcdf",
        description="Read and write INTERMAGNET ImagCDF geomagnetic data",
        long_description=readme,
        long_description_content_type="text/markdown",
        license="BSD-3-Clause",
        version="0.1.0",
        platforms="Cross Platform",
        classifiers=["Programming Language :: Python :: 3"],
        packages=["imagcdf"],
        package_dir={"imagcdf": "imagcdf"},
        zip_safe=True,
        install_requires=["h5py >= 3.0", "numpy>=1.16", "numba>=0.45"],
        extras_require={"tests": ["pytest>=3.5", "pytest-cov"]},
    )
    setup(**skw)


if __name__ == "__main__":
    main()
