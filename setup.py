import os

from setuptools import setup, find_packages


def _read_file(path: str) -> str:
    with open(path) as f:
        return f.read().strip()


# Versions
file_dir = os.path.dirname(os.path.realpath(__file__))
medreview_version = _read_file(os.path.join(file_dir, 'medreview', 'VERSION'))
packages = find_packages(include=['medreview', 'medreview.*'])


setup(
    # Metadata
    name='medreview',
    version=medreview_version,
    license='MIT',
    description='Anonymous medical reviews with encrypted ratings. Ratings of a doctor are only revealed as '
                'per-dimension averages, computed from a batched, asynchronously delivered decryption result.',

    # Dependencies
    python_requires='>=3.8,<4',
    install_requires=[
        'web3[tester]>=6,<8',
        'eth-abi>=4,<6',
        'parameterized>=0.8',
        'pycryptodome>=3.9,<4',
        'appdirs>=1.4,<1.5',
        'argcomplete>=1',
        'semantic-version>=2.8.4,<3',
    ],

    # Contents
    packages=packages,
    package_data={'medreview': ['VERSION']},
    entry_points={
        "console_scripts": [
            "medreview=medreview.__main__:main"
        ]
    },
)
