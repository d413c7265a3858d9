import re

from setuptools import setup, find_packages


def readme():
    with open('README.md') as f:
        return f.read()


def version():
    with open('wdbscan/_version.py') as f:
        return re.search(r'__version__ = "(.+)"', f.read()).group(1)


setup(
    name='wdbscan',
    version=version(),
    description='Weighted DBSCAN clustering with selectable outputs',
    long_description=readme(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.10',
    install_requires = [
        'numpy',
        'scipy',
        'scikit-learn',
        'numba',
        'pandas',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
