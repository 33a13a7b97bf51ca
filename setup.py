from setuptools import setup, find_packages

setup(
    name="euchre_engine",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.24.0",
        "redis>=4.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    author="EuchreBot Team",
    description="Euchre rules engine: bidding, trick play and scoring",
    python_requires=">=3.10",
)
