from setuptools import setup, find_packages

setup(
    name="voicescribe",
    version="0.1.0",
    description="Live speech transcription with AI-assisted language detection, enhancement and analysis",
    author="",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich>=12.5.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "aiohttp>=3.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-aiohttp>=1.0.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "voicescribe=voicescribe.main:main",
        ],
    },
)
