import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="netstruct",
    version="0.0.1",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="Network packets for humans",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/gipi/netstruct",
    packages=setuptools.find_packages(exclude=['tests']),
    install_requires=[
        'bitstring<5',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
