"""
Houndify Python SDK Setup Configuration.

This allows the SDK and its CLI to be installed via pip.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="houndify",
    version="1.0.0",
    author="Houndify SDK Contributors",
    description="Python SDK and command-line client for the Houndify text and voice query API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Multimedia :: Sound/Audio :: Speech",
        "Typing :: Typed",
    ],
    packages=find_packages(include=["houndify", "houndify.*", "houndify_cli", "houndify_cli.*"]),
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.25.0",
        "aiohttp>=3.9.0",
        "pydantic>=2.0.0",
        "click>=8.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
            "black>=23.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "houndify=houndify_cli.main:main",
        ],
    },
    package_data={
        "houndify": ["py.typed"],
    },
    keywords=[
        "houndify",
        "voice",
        "speech",
        "asr",
        "voice-search",
        "conversational-ai",
    ],
)
