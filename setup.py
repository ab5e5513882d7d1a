from setuptools import setup, find_packages

setup(
    name="openai-sdk",
    version="0.1.0",
    description="Typed client for OpenAI-compatible HTTP APIs",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests",
        "rich",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
