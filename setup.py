"""

Install the idkeys package.

"""

from setuptools import setup

setup(
    name="idkeys",
    version="0.0",
    description="A tool for converting identification keys into Darwin Core taxa.",
    keywords="taxonomy identification-keys darwin-core",
    author="Jelle Zijlstra",
    author_email="jelle.zijlstra@gmail.com",
    packages=["idkeys", "idkeys.catalog", "idkeys.resources"],
    entry_points={"console_scripts": ["idkeys = idkeys.__main__:main"]},
    python_requires=">=3.11",
    install_requires=[
        "regex",
        "PyYAML",
        "python-levenshtein",
        "mypy",
        "flake8",
        "pytest",
        "types-PyYAML",
        "types-regex",
    ],
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.11",
    ],
)
