import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="voting-dashboard",
    version="0.0.1",
    description="Voting contract relay and desktop voting dashboard",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "web3>=7",
        "eth-account",
        "requests",
        "PySide6",
    ],
    extras_require={
        "test": [
            "pytest",
            "requests-mock",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "voting-relay=relay.__main__:main",
            "voting-dashboard=dashboard.__main__:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
)
