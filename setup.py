"""
Installation setup for ttcards
"""
import configparser
import pathlib

import setuptools

# Establish project directory
project_root: pathlib.Path = pathlib.Path(__file__).resolve().parent

# Read config details to determine version-ing
config_file = project_root.joinpath("ttcards/resources/ttcards.properties")
config = configparser.ConfigParser()
if config_file.is_file():
    config.read(str(config_file))

setuptools.setup(
    name="ttcards",
    version=config.get("TTC", "version", fallback="1.0.0+fallback"),
    description="Trading card and card container injection for game content databases",
    long_description=project_root.joinpath("README.md").open(encoding="utf-8").read()
    if project_root.joinpath("README.md").is_file()
    else "",
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python",
        "Topic :: Games/Entertainment",
    ],
    keywords=[
        "Card Games",
        "Collectible",
        "Database",
        "JSON",
        "Trading Cards",
    ],
    python_requires=">=3.9",
    include_package_data=True,
    packages=setuptools.find_packages(include=["ttcards", "ttcards.*"]),
    package_data={"ttcards": ["resources/*.properties"]},
    install_requires=project_root.joinpath("requirements.txt")
    .open(encoding="utf-8")
    .readlines()
    if project_root.joinpath("requirements.txt").is_file()
    else [],  # Use the requirements file, if able
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["ttcards=ttcards.__main__:main"]},
)
