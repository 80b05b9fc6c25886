# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

import os
import re

from setuptools import find_packages, setup


def read_version():
    init_path = os.path.join(os.path.dirname(__file__), "layergauge", "__init__.py")
    with open(init_path, encoding="utf-8") as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.MULTILINE)
    if match is None:
        raise RuntimeError("Unable to find __version__ in layergauge/__init__.py")
    return match.group(1)


setup(
    name="layergauge",
    version=read_version(),
    description="Static shape inference and memory estimation for layer graphs",
    license="Apache-2.0",
    python_requires=">=3.9",
    packages=find_packages(include=["layergauge", "layergauge.*"]),
    install_requires=[
        "numpy>=1.21",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "layergauge=layergauge.cli:main",
        ],
    },
)
