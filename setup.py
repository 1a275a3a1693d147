from setuptools import setup, find_packages

setup(
    name="sceneforge",
    version="0.1.0",
    description="SceneForge - save node hierarchies as prefab documents and load them back",
    author="Your Name",
    packages=find_packages(include=["sceneforge", "sceneforge.*"]),
    include_package_data=True,
    install_requires=[
        # Record models and validation
        "pydantic>=2.0.0",

        # Prefab document format (with source marks)
        "pyyaml>=6.0.0",

        # Graph view of snapshots
        "networkx>=3.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sceneforge = sceneforge.app.cli:main",
        ],
    },
    python_requires=">=3.10",
    package_dir={"": "."},
)
