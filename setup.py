from setuptools import setup

with open('README.rst', 'r') as fh:
    long_description = fh.read().replace('.. include:: toc.rst\n\n', '')

# The lines below are parsed by `docs/conf.py`.
name = 'fuzzypsi'
version = '0.1.0'

setup(
    name=name,
    version=version,
    packages=[name,],
    package_dir={'': 'src'},
    python_requires='>=3.8',
    install_requires=[
        'parts~=1.3',
        'bitlist~=0.7'
    ],
    extras_require={
        'docs': [
            'sphinx~=4.2.0',
            'sphinx-rtd-theme~=1.0.0'
        ],
        'test': [
            'fountains~=1.3',
            'pytest~=7.0',
            'pytest-cov~=3.0'
        ],
        'lint': [
            'pylint~=2.14.0'
        ],
        'coveralls': [
            'coveralls~=3.3.1'
        ],
        'publish': [
            'setuptools~=62.0',
            'wheel~=0.37',
            'twine~=4.0'
        ]
    },
    license='MIT',
    description='Python library that implements oblivious key-value stores ' + \
                '(OKVS) and the binning layer of fuzzy private set ' + \
                'intersection (PSI) protocols.',
    long_description=long_description,
    long_description_content_type='text/x-rst',
)
