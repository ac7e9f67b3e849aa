# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="coursecatalog",
    version="0.1.0",
    description="Recursive, cached course media indexer producing a JSON catalog",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'coursecatalog=coursecatalog.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
