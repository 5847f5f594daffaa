from setuptools import setup

setup(
    name='tfic',
    version='1.0.0',
    description='TFI to JavaScript Compiler',
    packages=['tfic'],
    python_requires='>=3.8',
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'tfic=tfic.main:main',
        ],
    },
)
