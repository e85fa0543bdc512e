from setuptools import setup, find_namespace_packages

setup(
    name="provsync",
    version="0.1.0",
    packages=find_namespace_packages(include=["provsync", "provsync.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "rich",
        "rich-argparse",
        "python-dotenv",
        "toml",
        "asn1crypto",
        "pbxproj",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "provsync=provsync.cli:main",
        ],
    },
)
