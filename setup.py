"""Setup configuration for huskymod."""

from setuptools import setup, find_packages

setup(
    name="huskymod",
    version="0.1.0",
    description="Permission-gated kick, warn, ban and unban commands for py-cord bots",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord",
        "PyYAML",
        "prompt_toolkit",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
)
