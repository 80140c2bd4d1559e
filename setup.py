from setuptools import setup, find_packages

setup(
    name='workerplan',
    version='0.1.0',
    packages=find_packages(exclude=['workerplan.tests', 'workerplan.tests.*']),
    include_package_data=True,
    install_requires=[
        'typer',
        'fastapi',
        'uvicorn',
        'kubernetes',
        'pydantic>=2',
        'pyyaml',
        'python-dotenv',
        'requests'
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'workerplan=workerplan.cli:app'
        ]
    },
    author='Your Name',
    description='Node plan builder and change detector for RKE worker upgrades',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.9',
)
