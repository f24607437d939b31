from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/tabimport").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".")}

setup(
    name="tab-import",
    version="0.1.0",
    description="Schema-driven CSV / Excel importer with typed columns",
    python_requires=">=3.9",
    include_package_data=True,
    install_requires=[
        "typer",
        "pyyaml",
        "jsonschema",
        "pydantic>=2",
        "pandas",
        "openpyxl",
        "xlrd",
    ],
    extras_require={
        "parquet": ["pyarrow"],
        "test": ["pytest"],
    },
    entry_points={"console_scripts": ["tab-import=tabimport.cli:app"]},
    **pkg_args
)
