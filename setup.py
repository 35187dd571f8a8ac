from setuptools import setup, find_namespace_packages

setup(
    name="tds",
    version="0.1.0",
    description="The Daily Stallman - News Digest Generator",
    packages=find_namespace_packages(include=["tds", "tds.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "beautifulsoup4>=4.10.0",
        "trafilatura>=1.6.0",
        "readability-lxml>=0.8.1",
        "backoff>=2.0.0",
        "async-timeout>=4.0.0",
        "tqdm>=4.62.0",
        "pyyaml>=6.0",
        "requests>=2.25.0",
        "feedparser>=6.0.0",
        "python-dateutil>=2.8.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tds=tds.cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
