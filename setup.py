"""
Setup script for srs-insight.

srs-insight is an analytics and forecasting engine for learners on an
SRS (spaced repetition) kanji curriculum:

1. Forecasts - Simulated daily review workload and level progression
2. Pace - Outlier-aware level pace statistics and level 60 projections
3. Analytics - Leeches, accuracy, knowledge stability, milestones, burns

The 'srs-insight' command renders each analysis from a JSON dataset.
"""

from setuptools import find_packages, setup

setup(
    name="srs-insight",
    version="0.1.0",
    description="Analytics and forecasting engine for spaced repetition learners",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="srs-insight contributors",
    packages=find_packages(include=["srs_insight", "srs_insight.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
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
            "srs-insight=srs_insight.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="spaced-repetition srs kanji forecasting analytics cli",
)
