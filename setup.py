"""
Setup configuration for Commerce Desk.

This setup.py enables installation of the package via pip:
    pip install -e .
    pip install -e ".[test]"
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read README for long description
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Read requirements
requirements_path = Path(__file__).parent / "requirements.txt"
requirements = [
    "pydantic>=2.5.0",
    "pydantic-settings>=2.7.0",
    "structlog>=23.2.0",
    "click>=8.1.0",
    "rich>=13.7.0",
    "markdown2>=2.4.10",
    "pandas>=2.0.0",
]
if requirements_path.exists():
    requirements = [
        line.strip()
        for line in requirements_path.read_text().split("\n")
        if line.strip() and not line.startswith("#")
    ]

test_requirements = [
    "pytest>=7.4.0",
    "pytest-cov>=4.1.0",
]

setup(
    name="commerce-desk",
    version="1.0.0",
    author="Commerce Desk Team",
    author_email="team@example.com",
    description="Listing packs and action plans for multi-marketplace e-commerce sellers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_dir={"": "."},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "dev": test_requirements,
        "test": test_requirements,
    },
    entry_points={
        "console_scripts": [
            "commerce-desk=commerce_desk.main:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business",
        "Typing :: Typed",
    ],
    keywords=[
        "e-commerce",
        "amazon",
        "flipkart",
        "meesho",
        "myntra",
        "catalog",
        "listings",
        "marketplace",
    ],
    license="MIT",
    zip_safe=False,
)
