"""
Crisis Engine — Venezuela Crisis Model
Deterministic phase-gated crisis simulation package.
"""

from setuptools import setup, find_packages

setup(
    name="crisis-engine",
    version="1.0.0",
    description="Deterministic socio-political crisis simulation with a "
                "phase-gated policy pathway, Dual-Pull metrics and actor payoffs.",
    packages=find_packages(include=["crisis_engine", "crisis_engine.*"]),
    py_modules=["cli"],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "gymnasium>=0.29",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
)
