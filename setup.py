from setuptools import find_packages, setup

setup(
    name="walletfetch",
    version="0.1.0",
    description="Download MetaMask and Phantom extension builds for browser end-to-end tests",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "rich",
        "platformdirs",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest<9",
            "pytest-mock",
        ],
    },
)
