from setuptools import setup

setup(
    name="tank",
    version="0.1.0",
    description="Small declarative template language that compiles to html",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['tank'],
    python_requires=">=3.7",
    install_requires=[
        "watchdog",
        "pyyaml"
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tank=tank.__main__:main"],
    },
)
