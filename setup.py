from setuptools import setup

from app.__version__ import __version_string__

setup(
    name="chip8-interpreter",
    version=__version_string__,
    description="CHIP-8 virtual CPU interpreter with a pygame front end",
    python_requires=">=3.11",
    package_dir={"": "app"},
    packages=["chip8", "util"],
    py_modules=["logger", "resources", "__version__"],
    install_requires=[
        "numpy",
        "bitarray",
        "returns",
        "rich",
        "pygame",
    ],
    extras_require={"test": ["pytest"]},
    include_package_data=True,
    zip_safe=False,
)
