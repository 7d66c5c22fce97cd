from setuptools import setup, find_packages

setup(
    name="calendar-notes",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "requests>=2.31",
        "python-dotenv>=1.0",
        "google-auth>=2.0",
        "google-auth-oauthlib>=1.0",
        "google-auth-httplib2>=0.1",
        "google-api-python-client>=2.0",
        "fastapi>=0.100",
        "uvicorn>=0.20",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",
            "httplib2>=0.19",
        ],
    },
    python_requires=">=3.9",
)
