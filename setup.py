################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

import setuptools


PACKAGE_NAME: str = "covariance_dynamics"

setuptools.setup(
    name="covariance-dynamics",
    version="0.1.0",
    author="Garrett Brown",
    description=(
        "Geometry-preserving stochastic covariance dynamics with a "
        "Markovian memory lift"
    ),
    license="Apache-2.0",
    zip_safe=True,
    keywords=[
        "covariance",
        "SDE",
        "SPD",
    ],
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    python_requires=">=3.10",
    packages=setuptools.find_packages(include=[PACKAGE_NAME, PACKAGE_NAME + ".*"]),
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
