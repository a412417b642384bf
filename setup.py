#  -*- coding: utf-8 -*-
"""
Setuptools script for the upnppunch project.
"""

import os
from textwrap import fill, dedent

from setuptools import setup, find_packages


def required(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return [line.strip() for line in f.read().split('\n') if line.strip()]


setup(
    name="upnppunch",
    version="0.1.0",
    packages=find_packages(
        exclude=[
            "*.tests",
            "*.tests.*",
            "tests.*",
            "tests",
            "*.examples",
            "*.examples.*",
            "examples.*",
            "examples"
        ]
    ),
    scripts=[],
    include_package_data=True,
    tests_require=['pytest', 'mock', 'lxml'],
    install_requires=required('requirements.txt'),
    extras_require={
        'test': ['pytest', 'mock', 'lxml'],
    },
    python_requires='>=3.8',
    zip_safe=False,
    # Metadata for upload to PyPI
    author='upnppunch contributors',
    description=fill(dedent("""\
        Minimal non-blocking UPnP IGD control point for opening TCP port
        mappings on a home router.
    """)),
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Communications",
        "Topic :: System :: Networking"
    ],
    license="MIT",
    keywords="upnp igd nat port-mapping ssdp"
)
