from setuptools import setup, find_packages

setup(
    name="debgraph",
    version="0.1.0",
    description="Dependency graphs of Debian packages, discovered through dpkg-query.",
    license="GPL-3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "rich>=13.0.0",
        "graphviz>=0.20",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "debgraph=debgraph.debgraph:main",
        ],
    },
)
