from setuptools import setup

test = ['pytest>=6.0']

extras_require = {
    'test': test
}

setup(
    name='pyncfile',
    version='0.1.0',
    packages=['ncfile', 'ncfile._hl', 'ncfile.utils'],
    license='GNU General Public License v3 (GPLv3)',
    description='Typed accessors for netCDF files',
    python_requires='>=3.7',
    install_requires=[
        'netCDF4>=1.5.0',
        'numpy>=1.17.0'
    ],
    extras_require=extras_require
)
