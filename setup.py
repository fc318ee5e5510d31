#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Setup script for clustree
"""

from setuptools import setup, find_packages

# Read the README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Basic requirements
install_requires = [
    "numpy>=1.19.0",
    "pandas>=1.0.0",      # Required for tables and group-by
    "pyyaml>=5.0",        # Required for configuration files
    "networkx>=2.6",      # Required for graph export and layout
    "matplotlib>=3.0.0",  # Required for plotting
    "seaborn>=0.11.0",    # Required for plot palettes
    "scikit-learn>=1.0.0", # Required for k-means resolutions
]

extras_require = {
    "test": [
        "pytest>=6.0",
    ],
}

setup(
    name="clustree",
    version="1.0.0",
    author="clustree Development Team",
    author_email="",
    description="Clustering trees - visualise clusterings of the same data at increasing resolution",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "clustree=clustree.cli:main",
        ],
    },
    zip_safe=False,
)
