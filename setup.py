"""revproof setup - Every revision accounted for."""
from setuptools import setup, find_packages

setup(
    name="revproof",
    version="0.1.0",
    description="revproof: canonical identifiers, revision chains and Merkle witness verification",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "ecdsa>=0.18",
        "pycryptodomex>=3.15",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "revproof=revproof.cli.main:cli",
        ],
    },
)
