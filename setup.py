"""Setup configuration for the Scrum Pointing Tool."""

from setuptools import setup, find_packages

setup(
    name="scrum-pointing-node",
    version="0.1.0",
    description="Real-time Scrum story pointing rooms over WebSockets",
    author="DS-G1-SMS Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "websockets>=14.0",
        "textual>=0.47.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "pointing-node=pointing_node.main:main",
            "pointing-client=pointing_client.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
