"""
Setup script for readpath.

readpath is the adaptive core of a personalized reading product. It serves
two roles:

1. Skill estimation - Glicko-style comprehension rating per question category
2. Skill sequencing - next-skill recommendation over a prerequisite-gated tree

The 'readpath' command is a developer tool for validating catalogs and
previewing recommendations; the engine itself is a pure library.
"""

from setuptools import find_packages, setup

setup(
    name="readpath",
    version="1.0.0",
    description="Adaptive comprehension rating and skill-tree recommendation engine",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Readpath",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    package_data={"readpath.catalog": ["data/*.yaml"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Catalog files
        "pyyaml>=6.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "readpath=readpath.cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive glicko rating reading comprehension skill-tree",
)
