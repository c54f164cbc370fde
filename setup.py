"""
Setup script for silinapse.
"""

from setuptools import setup, find_packages

setup(
    name="silinapse",
    version="0.1.0",
    description="Packed symmetric weights and a stochastic Boltzmann machine simulator",
    author="silinapse Project",
    packages=find_packages(exclude=["*.tests", "*.tests.*", "tests"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
