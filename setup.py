from setuptools import setup, find_packages

setup(
    name='JoinDB',
    version='1.0.0',
    description='Copy the tables of many SQLite databases found on disk into one database',
    author='Sindhujha Kumaran',
    author_email='s.kumaran@uci.edu',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    entry_points={
        'console_scripts': [
            'joindb = JoinDB.join_query:main',
        ],
    },

    install_requires=[
        'sqlalchemy>=2.0',
        'PyYAML',
        'pandas',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.9',
)
