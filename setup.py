from os import path

from setuptools import find_packages, setup

min_version = (3, 9)

here = path.abspath(path.dirname(__file__))


with open(path.join(here, "README.md"), encoding="utf-8") as readme_file:
    readme = readme_file.read()


def read_requirements(filename):
    with open(path.join(here, filename)) as requirements_file:
        # Parse requirements.txt, ignoring any commented-out lines.
        requirements = [
            line
            for line in requirements_file.read().splitlines()
            if line and not line.startswith("#")
        ]
    return requirements


categorized_requirements = {
    key: read_requirements(f"requirements-{key}.txt") for key in ["server", "dev"]
}
extras_require = {}
extras_require["dev"] = categorized_requirements["dev"]
extras_require["all"] = sorted(set(sum(categorized_requirements.values(), [])))

setup(
    name="tablegate",
    version="0.1.0",
    description="Administer HBase-style tables over HTTP in XML and plain text",
    long_description=readme,
    long_description_content_type="text/markdown",
    python_requires=">={}".format(".".join(str(n) for n in min_version)),
    install_requires=categorized_requirements["server"],
    extras_require=extras_require,
    packages=find_packages(exclude=["docs", "tests"]),
    entry_points={
        "console_scripts": [
            "tablegate = tablegate.commandline.main:main",
        ]
    },
    license="BSD (3-clause)",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Natural Language :: English",
        "Programming Language :: Python :: 3",
    ],
)
