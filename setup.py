#!/usr/bin/env python3
# =============================================================================
#  str-checker — setup.py
#
#  The version is read from str_checker/__init__.py so there is a single
#  source of truth.
#
#  Typical use:
#      pip install -e ".[dev]"
#      python -m pytest
# =============================================================================

from __future__ import annotations

import re
from pathlib import Path

from setuptools import setup, find_packages

_HERE = Path(__file__).resolve().parent


def _read_version() -> str:
    """Extract ``__version__`` from the package's ``__init__.py``."""
    init = _HERE / "str_checker" / "__init__.py"
    text = init.read_text(encoding="utf-8")
    match = re.search(r'^__version__\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if match:
        return match.group(1)
    return "0.0.0"


def _read_long_description() -> str:
    """Read README.md for the long description."""
    readme = _HERE / "README.md"
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="str-checker",
    version=_read_version(),
    description=(
        "Explicit-state reachability, invariant and deadlock checking for "
        "systems given as semantic transition relations."
    ),
    long_description=_read_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    author="str-checker contributors",
    python_requires=">=3.10",
    packages=find_packages(
        include=["str_checker", "str_checker.*"],
        exclude=["tests", "tests.*", "examples", "examples.*"],
    ),
    package_data={
        "str_checker": ["py.typed"],
    },
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "hypothesis>=6.0",
            "ruff>=0.4",
            "mypy>=1.10",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Software Development :: Quality Assurance",
        "Topic :: Scientific/Engineering",
        "Typing :: Typed",
    ],
    keywords=[
        "model-checking",
        "explicit-state",
        "reachability",
        "transition-system",
        "invariant",
        "deadlock",
    ],
    zip_safe=False,
)
