#!/usr/bin/env python3
"""
Setup script for Landmark Rules
"""

from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent


def read_requirements():
    """Read required packages from requirements.txt"""
    lines = (ROOT / "requirements.txt").read_text().splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


setup(
    name="landmark-rules",
    version="0.1.0",
    description="Gaze direction and hand gesture rules over MediaPipe landmarks",
    python_requires=">=3.9",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=read_requirements(),
    extras_require={"test": ["pytest>=7"]},
    entry_points={
        "console_scripts": [
            "landmark-rules=landmark_rules.main:main",
        ],
    },
)
