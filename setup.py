from setuptools import find_packages, setup

setup(
    name="ser-io",
    version="0.1.0",
    description="Reader and writer for the SER astronomical video container format",
    author="Garrett Johnson",
    packages=find_packages(include=["ser_io", "ser_io.*"]),
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.23.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
