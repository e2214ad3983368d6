"""Setup configuration for the parejas-jigsaw package."""

from setuptools import find_packages, setup

setup(
    name="parejas-jigsaw",
    version="0.1.0",
    packages=find_packages(include=["jigsaw", "jigsaw.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pillow",
        "pydantic>=2",
        "pydantic-settings",
        "typing-extensions",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
)
