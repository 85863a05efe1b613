"""
Packaging for qsc-control-connector-py.

Tests run with `pytest src integrate`; the integration tests are skipped unless QSC_ADDRESS names a unit.
"""

from setuptools import setup

setup(
    name='qsc-control-connector-py',
    version='0.0.1',
    description='A client for the TCP control protocol of QSC audio processors.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['qsccontrol', 'qsccontrol.conduit', 'qsccontrol.config', 'qsccontrol.connector',
              'qsccontrol.protocol', 'qsccontrol.support'],
    package_data={'qsccontrol.config': ['*.cfg']},
    python_requires='>=3.6',
    install_requires=['configobj>=5.0.6'],
    extras_require={
        'test': ['PyHamcrest>=2.0', 'timeout-decorator>=0.4', 'pytest>=6.0'],
    },
    zip_safe=False,
)
