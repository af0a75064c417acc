from setuptools import setup, find_packages

setup(
    name="c4bot",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "filelock",  # Locking for the game history file
        "python-telegram-bot[job-queue]>=20.0",  # Chat front end and idle game pruning
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
)
