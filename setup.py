# setup.py
from setuptools import find_packages, setup

setup(
    name="query-sorting",
    version="0.1.0",
    python_requires=">=3.11",
    packages=find_packages(include=["sorting", "sorting.*"]),
    install_requires=[
        "fastapi>=0.110",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "SQLAlchemy>=2.0",
        "structlog>=24.1",
    ],
    extras_require={
        "test": [
            "httpx>=0.27",
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
