#!/usr/bin/env python3
"""
Setup script for RelayChat
"""

from setuptools import setup

# Read README for long description
try:
    with open('README.md', 'r', encoding='utf-8') as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "RelayChat - channel based chat server"

# Read requirements
try:
    with open('requirements.txt', 'r', encoding='utf-8') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    requirements = ['colorama>=0.4.6']

setup(
    name='relaychat',
    version='1.0.0',
    description='Channel based chat server with owned public and private channels',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='RelayChat Team',
    author_email='',
    license='MIT',

    py_modules=[
        'broadcast',
        'channel_registry',
        'commands',
        'config_manager',
        'input_validator',
        'models',
        'protocol',
        'server',
        'server_model',
        'user_registry',
    ],

    # Dependencies
    install_requires=requirements,
    extras_require={
        'test': ['coverage'],
    },

    # Python version requirement
    python_requires='>=3.8',

    # Entry points for command-line scripts
    entry_points={
        'console_scripts': [
            'relaychat-server=server:main',
        ],
    },

    # Classification
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Communications :: Chat',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Operating System :: OS Independent',
    ],

    # Keywords
    keywords='irc chat channels server',
)
