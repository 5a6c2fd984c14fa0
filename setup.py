from setuptools import setup, find_packages

setup(
    name="driver-monitor",
    version="0.1.0",
    description="Driving-behaviour event detection from phone motion, GPS and face-presence streams",
    packages=find_packages(exclude=["tests"]),
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.24,<2.0",
        "scipy>=1.10",
        "pandas>=2.0,<3.0",
        "tqdm>=4.65",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
