import os
from setuptools import find_packages, setup


def main():
    def read(fname):
        with open(os.path.join(os.path.dirname(__file__), fname)) as _in:
            return _in.read()

    setup(
        name="Scrawl",
        version="0.1",
        url="",
        description="Handwritten digit classification with a from-scratch neural network",
        packages=find_packages(exclude=["tests", "tests.*"]),
        long_description=read('README.md'),
        long_description_content_type="text/markdown",
        python_requires=">=3.8",
        install_requires=["numpy", "pandas"],
        extras_require={"test": ["pytest"]},
    )

if __name__ == "__main__":
    main()
