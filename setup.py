from setuptools import setup, find_packages
import re

# Read version from payplan/__init__.py
with open('payplan/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='pay-plan',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'payplan': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'pay-plan=payplan.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Paycheck contribution projection and multi-job retirement/HSA optimization.',
    python_requires='>=3.10',
)
