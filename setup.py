"""Setup configuration for docs-sync."""
from setuptools import setup, find_packages

setup(
    name="docs-sync",
    version="1.0.0",
    description="Sync documentation archives into a local tree and rebuild its sitemap",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "click>=8.0.0",
    ],
    extras_require={
        "dev": ["pytest", "httpx"],
    },
    entry_points={
        "console_scripts": [
            "docs-sync=docs_sync.sync.cli:main",
        ],
    },
)
