from setuptools import setup, find_packages

setup(
    name="nerdland-episodes",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "aiohttp>=3.8.0",
        "beautifulsoup4>=4.11.0",
        "python-dotenv>=0.19.0",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "pytest-mock>=3.10.0",
            "faker>=18.0.0",
            "aioresponses>=0.7.4",
            # aioresponses 0.7.x is incompatible with aiohttp 3.14 (ClientResponse stream_writer)
            "aiohttp<3.14",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "isort>=5.12.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "nerdland-episodes=main:main",
        ],
    },
    python_requires=">=3.8",
)
