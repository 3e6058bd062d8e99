from setuptools import setup, find_packages

setup(
    name="sds-csi-controller",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "grpcio>=1.50.0",
        "requests>=2.28.0",
        "prometheus-client>=0.16.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sds-csi-controller=src.csi.driver:main",
        ],
    },
    python_requires=">=3.8",
)
