#!/usr/bin/env python
from setuptools import setup
setup(
    name='curlobj',
    version='1.0',
    description='Object interface to libcurl transfers',
    author='Six Apart',
    author_email='python@sixapart.com',
    url='http://sixapart.github.com/curlobj/',

    packages=['curlobj'],
    provides=['curlobj'],
    python_requires='>=3.7',
    install_requires=['pycurl>=7.43'],
    extras_require={
        'test': ['mox3', 'pytest'],
    },
)
