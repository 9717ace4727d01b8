#!/usr/bin/python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import os

ROOT = os.path.abspath(os.path.dirname(__file__))

long_description = ''
if os.path.exists(os.path.join(ROOT, 'README.md')):
    with open(os.path.join(ROOT, 'README.md'), 'r', encoding='utf-8') as f:
        long_description = f.read()

setup(
    name='pyresequil',
    include_package_data=True,
    version='0.1.0',  # Ideally should be same as your GitHub release tag version
    packages=find_packages(),
    python_requires='>=3.8',
    description='pyResEquil - Equilibration initialisation of black-oil reservoir models',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='Mark W. Burgoyne',
    author_email='mark.w.burgoyne@gmail.com',
    keywords=['equilibration', 'petroleum', 'reservoir', 'initialisation'],
    classifiers=[],
    install_requires=[
        'numpy',
        'scipy',
        'pandas',
        'tabulate',
        'setuptools'
    ],
    extras_require={
        'test': ['pytest'],
    },
)
