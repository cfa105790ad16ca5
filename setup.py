#!/usr/bin/env python3
"""
Image Upscaling Setup Script

Install with: pip install -e .
Tests:        pip install -e .[test] && pytest
"""

from setuptools import setup, find_packages

setup(
    name="image-upscaling",
    version="0.1.0",
    description="Content-aware image upscaling with tiered resampling algorithms",
    author="Image Upscaling Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.7.0",
        "scikit-image>=0.19.0",
        "tqdm>=4.60.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "image-upscaling=image_upscaling.core.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Graphics",
    ],
)
