"""Setup script for Humanoid Control project."""

from setuptools import find_packages, setup

setup(
    name="humanoid-control",
    version="0.1.0",
    description="Whole-body trajectory synthesis and joint-limit-safe command assembly for humanoid robots",
    author="Humanoid Control Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"humanoid_control": ["configs/*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=2.0.0",
        "scipy>=1.11.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
)
