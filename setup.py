from setuptools import setup, find_packages

setup(
   name='ShareCal',
   version='0.1',
   description='Nested logit share allocation with capacity limits, fixed output & calibration',
   packages=find_packages(exclude=['tests']),
   install_requires=['networkx',
                     'numpy',
                     'pandas>=1.2',
                     'polars',
                     'scipy'
                     ],  # external packages as dependencies
   extras_require={'test': ['pytest']},
)
