import os
import sys

import setuptools
from setuptools import find_packages

root = os.path.abspath(os.path.dirname(__file__))

sys.path.append(os.path.join(root, "rokka_sdk"))

from version import __version__

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_requirements(path):
    if not isinstance(path, list):
        path = [path]
    requirements = []
    for p in path:
        with open(p) as fh:
            requirements.extend([line.strip() for line in fh if line.strip()])
    return requirements


setuptools.setup(
    name="rokka-sdk",
    version=__version__,
    description="Python client of the rokka image-management API.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(
        where=root,
        exclude=(
            "docs",
            "requirements",
            "tests",
            "tests.*",
        ),
    ),
    install_requires=read_requirements(["requirements/requirements.sdk.http.txt"]),
    extras_require={
        "test": read_requirements(["requirements/requirements.test.unit.txt"]),
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development",
        "Topic :: Multimedia :: Graphics",
        "Typing :: Typed",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
