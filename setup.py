#!/usr/bin/env python

import os
from setuptools import setup, find_packages

work_dir = os.path.dirname(os.path.realpath(__file__))
mod_dir = os.path.join(work_dir, 'src', 'kafka_bridge')


def get_version():
    with open(os.path.join(mod_dir, '__init__.py')) as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=')[1].strip().strip('"\'')
    raise RuntimeError('Unable to find __version__')


INSTALL_REQUIRES = [
    'confluent-kafka>=2.0.0',
    'attrs>=21.3.0',
]

TEST_REQUIRES = [
    'pytest',
]


setup(
    name='kafka-bridge',
    version=get_version(),
    description='Blocking-send mTLS producer and consumer handles over librdkafka',
    license='Apache License v2.0',
    python_requires='>=3.8',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    install_requires=INSTALL_REQUIRES,
    extras_require={
        'tests': TEST_REQUIRES,
    },
)
