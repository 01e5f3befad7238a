#!/usr/bin/env python
""" An HTTP gateway to schema-less MongoDB collections """

from setuptools import setup, find_packages

setup(
    name='mongorest',
    version='1.0.0',

    license='BSD',
    description=__doc__,
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    keywords=['mongodb', 'rest', 'json'],

    packages=find_packages(exclude=('tests',)),
    scripts=[],
    entry_points={
        'console_scripts': [
            'mongorest = mongorest.app:main',
        ],
    },

    python_requires='>= 3.8',
    install_requires=[
        'pymongo >= 4.0',
        'flask >= 2.0',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'mongomock >= 4.1',
        ],
    },
    include_package_data=True,

    platforms='any',
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Framework :: Flask',
        'Topic :: Database :: Front-Ends',
        'Topic :: Internet :: WWW/HTTP :: HTTP Servers',
    ],
)
