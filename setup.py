from setuptools import setup, find_packages

setup(
    name="live_editor",
    version="0.1.0",
    packages=find_packages(include=["live_editor", "live_editor.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests",
        "pyyaml",
        # HTTP edit endpoint
        "fastapi>=0.100",
        "pydantic>=2.0",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "live-editor=live_editor.cli:main",
        ],
    },
    author="Uday Kanth",
    description="Apply LLM-proposed file edits to a local project over HTTP.",
)
