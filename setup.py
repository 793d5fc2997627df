#!/usr/bin/env python
from setuptools import find_packages, setup

about = {}
with open("src/momentos/version.py") as f:
    exec(f.read(), about)

setup(
    name="momentos",
    version=about["__version__"],
    description="Photo composition with color filters, frames and text stickers",
    license="MIT",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "attrs>=23.1.0",
        "numpy>=1.21",
        "Pillow>=10.1.0",
        "scipy>=1.7",
        "scikit-image>=0.19",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "momentos=momentos.cli:main",
        ],
    },
)
