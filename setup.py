#!/usr/bin/env python

from os.path import abspath, dirname, join

from setuptools import setup

with open(join(dirname(abspath(__file__)), 'cututils', 'version.py')) as version_file:
    exec(compile(version_file.read(), "version.py", 'exec'))

setup(name='cututils',
      version=version,
      description="Cut-style selection lists and positional extraction of bytes, "
                  "characters, and fields",
      packages=['cututils', 'cututils.scripts'],
      # 3.8 and up, but not Python 4
      python_requires='~=3.8',
      install_requires=[
          'immutablecollections>=0.12.0',
          'attrs>=21.4.0',
          'PyYAML>=6.0',
          'types-PyYAML==6.0.8',
          'typing_extensions',
      ],
      extras_require={
          'test': ['pytest'],
      },
      package_data={'cututils': ['py.typed']},
      scripts=['cututils/scripts/cut.py'],
      classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ]
      )
