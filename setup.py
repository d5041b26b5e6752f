# setup.py
from setuptools import setup, find_packages

setup(
    name="site_shot",
    version="0.1.0",
    description="SiteShot: полностраничные скриншоты всех URL сайта с возобновлением",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"site_shot": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "jinja2>=3.1",
        "lxml>=5.0",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "site-shot=site_shot.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
