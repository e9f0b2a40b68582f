# -*- coding: utf-8 -*-
from setuptools import setup
from setuptools import find_packages
import nativebind

with open('README.md', encoding='utf-8') as file:
    long_description = file.read()

setup(
    name='Nativebind',
    version=nativebind.__version__,
    description='Expose Python classes to an embedded script runtime with tracked wrappers and ownership traits.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',

    packages=find_packages(exclude=['tests']),
    install_requires=[],
    include_package_data=True,
    zip_safe=False,
    extras_require={
        'testing': ['pytest', 'pytest-xdist'],
    },
    entry_points={
        'console_scripts': [
            'nativebind = nativebind:main',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Console',
        'Topic :: Software Development :: Interpreters',
        'Topic :: Software Development :: Libraries',
    ],
)
