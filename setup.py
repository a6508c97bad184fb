# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="classpath-scanner",
    version="0.1.0",
    description="Scans hierarchical search paths of directories and archives and classifies the resources they hold",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["classpath_scanner*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
