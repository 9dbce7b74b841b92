# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

import os
import re

from setuptools import find_packages, setup


def read_version():
    init_path = os.path.join(os.path.dirname(__file__), "eagerop", "__init__.py")
    with open(init_path, encoding="utf-8") as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M)
    if not match:
        raise RuntimeError("Unable to find __version__ in eagerop/__init__.py")
    return match.group(1)


setup(
    name="eagerop",
    version=read_version(),
    description="Eager operation binding for the TensorFlow C API",
    author="Wahyu Ardiansyah",
    license="Apache-2.0",
    packages=find_packages(include=["eagerop", "eagerop.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "rich>=12.0",
    ],
    extras_require={
        "tensorflow": ["tensorflow>=2.10"],
        "dev": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "eagerop=eagerop.cli:main",
        ],
    },
)
