"""
Setup script for Worklog Dashboard
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_file.exists():
    requirements = [
        line.strip()
        for line in requirements_file.read_text().splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="worklog-dashboard",
    version="1.0.0",
    description="Worklog analytics and reporting for Jira",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["worklog_dashboard", "worklog_dashboard.*"]),
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "responses>=0.23.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "worklog-report=worklog_dashboard.cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Bug Tracking",
        "Programming Language :: Python :: 3",
    ],
    keywords="jira time-tracking reporting worklog analytics",
)
