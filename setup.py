"""Packaging for the twitter-bookmarks CLI.

    pip install -e ".[test]"    # development checkout with test tools
    pip install .               # regular install, provides `twitter-bookmarks`
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_requirements(name):
    """Requirement specifiers from a requirements file, skipping comments."""
    path = HERE / name
    if not path.exists():
        return []
    return [
        line.strip()
        for line in path.read_text().splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


readme = HERE / "README.md"
test_requirements = read_requirements("requirements-dev.txt")

setup(
    name="twitter-bookmarks",
    version="0.1.0",
    description="Export X/Twitter bookmarks to JSON or Markdown over the Chrome DevTools Protocol",
    long_description=readme.read_text() if readme.exists() else "",
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(include=["twitter_bookmarks", "twitter_bookmarks.*"]),
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "dev": test_requirements,
        "test": test_requirements,
    },
    entry_points={
        "console_scripts": [
            "twitter-bookmarks=twitter_bookmarks.cli.main:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Internet :: WWW/HTTP :: Browsers",
        "Topic :: Utilities",
    ],
    keywords="twitter x bookmarks chrome devtools cdp export",
)
