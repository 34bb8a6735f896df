"""Setup script for terragraph."""
from setuptools import setup, find_packages

setup(
    name="terragraph",
    version="0.1.0",
    description="Node-graph terrain prototyper: deterministic Luanti noise, graph evaluation and Luamap Lua export",
    packages=find_packages(where=".", include=("terragraph", "terragraph.*")),
    package_dir={"": "."},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "omegaconf>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["terragraph=terragraph.cli:main"],
    },
)
