from setuptools import setup, find_packages

setup(
    name="livy-client",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"livy_client": ["configs/*.yaml"]},
    install_requires=[
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "livy-client-conf=livy_client.cli:main",
        ],
    },
    python_requires=">=3.10",
)
