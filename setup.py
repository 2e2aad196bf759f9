# setup.py
from setuptools import setup, find_packages

setup(
    name="quickpackage",
    version="0.1.0",
    description="Export a content item and its descendants into a single package archive",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    install_requires=[
        "fastapi",
        "pydantic",
        "starlette",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    python_requires=">=3.10",
)
