import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="strongarm",
    version="0.0.1",
    author="Fredrik Feyling",
    author_email="fredrik.feyling@hotmail.com",
    description="StrongARM comparator layout generators",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={'': '.'},
    packages=setuptools.find_packages(include=['strongarm', 'strongarm.*']),
    python_requires='>=3.10',
    install_requires = [
        'numpy',
        'shapely',
        'pint',
        'pyyaml',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
