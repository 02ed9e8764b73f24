import setuptools
from setuptools import find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setuptools.setup(
    name="fleet-storage-benchmark",
    version="0.1.0",
    author="Bayo Adejare",
    author_email="bayo.adejare@outlook.com",
    description="Write/read latency benchmark of relational, document and key-value stores for fleet telemetry",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/bayo-adejare/fleet-optimization",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        # Core Data Engineering
        "pandas>=2.2.2",
        "numpy>=1.26.4",
        "prefect>=3.4.14",        # Optional flow orchestration
        "psycopg2-binary>=2.9.9", # PostgreSQL adapter
        "sqlalchemy>=2.0.29",     # Relational backend
        "jsonschema>=4.18.0",     # Config file validation

        # Document & key-value stores
        "pymongo>=4.6.0",
        "redis>=5.0.1",

        # Run tracking
        "mlflow>=2.13.0",

        # Utilities
        "python-dotenv>=1.0.1",    # Environment management
        "pyyaml>=6.0.1",           # Configuration files
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "mongomock>=4.1.2",
            "fakeredis>=2.21.0",
            "flake8>=6.0.0",
            "black>=24.0.0",
            "mypy>=1.0.0"
        ],
        "test": [
            "pytest>=7.0.0",
            "mongomock>=4.1.2",
            "fakeredis>=2.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fleet-benchmark=fleet_benchmark.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Database",
        "Topic :: System :: Benchmark",
        "Operating System :: OS Independent"
    ],
    python_requires=">=3.11",
    include_package_data=True,
)
