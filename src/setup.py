import os
from setuptools import setup, find_namespace_packages

def parse_requirements(requirements):
    with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), requirements)) as f:
        return [l.strip('\n') for l in f if l.strip('\n') and not l.startswith('#')]

requirements = parse_requirements("requirements.txt")

setup(
    name='portal_backend',
    version='0.1.0',
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "httpx"],
    },
    packages=find_namespace_packages(include=["portal_backend", "portal_backend.*"]),
    entry_points={
        "console_scripts": [
            "portal=portal_backend.cli.cli:cli",
        ],
    }
)
