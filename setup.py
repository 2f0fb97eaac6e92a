from setuptools import setup, find_packages

setup(
    name="shexmap",
    version="0.1.0",
    description="Schema-directed RDF graph lens driven by ShEx map annotations",
    packages=find_packages(include=["shexmap", "shexmap.*"]),
    install_requires=[
        "click>=8.0",
        "rdflib>=6.0",
        "pyshacl>=0.20",
        "PyYAML>=6.0",
        "tabulate>=0.8.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["shexmap=shexmap.cli.__main__:main"],
    },
    python_requires=">=3.10",
    license="MIT",
)
