from setuptools import setup, find_packages

setup(
    name="smbclient-bridge",
    version="1.0.0",
    description="smbclient bridge – stat, list, get, put, mkdir, rmdir and del on SMB shares via the smbclient CLI",
    author="totekuh",
    python_requires=">=3.9",
    packages=find_packages(exclude=("tests", "tests.*")),
    include_package_data=True,
    install_requires=[
        "impacket>=0.11.0",
        "typer>=0.12.0",
        "rich>=13.0.0",
        "toml>=0.10.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "smbbridge=smbbridge.cli.main:app",
        ]
    },
)
