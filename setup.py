import setuptools
from os.path import join, dirname

def get_file_contents(filename):
    package_directory = dirname(__file__)
    with open(join(package_directory, filename), 'r', encoding='utf-8') as file:
        contents = file.read()
    return contents

long_description = """Runs an ordered chain of bioinformatics modules, each as batched worker
scripts under a driver script, with resumable STARTED/COMPLETE state markers.
"""
version = get_file_contents(join('modulechain', 'version.txt')).strip()

setuptools.setup(
    name='modulechain',
    version=version,
    description='Sequential module pipelines driven by generated shell and R scripts.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=[
        'modulechain',
        'modulechain.entry_point',
        'modulechain.pipeline',
        'modulechain.pipeline.scripts',
        'modulechain.pipeline.templates',
        'modulechain.standalone_utilities',
    ],
    classifiers=[
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
        'Intended Audience :: Science/Research',
    ],
    package_data={
        'modulechain': [
            'version.txt',
        ],
        'modulechain.pipeline.scripts': [
            'run.py',
            'status.py',
            'report_failures.py',
            'merge_metadata.py',
        ],
        'modulechain.pipeline.templates': [
            'worker.sh.jinja',
            'worker.R.jinja',
            'driver.sh.jinja',
            'driver.R.jinja',
        ],
    },
    python_requires='>=3.10',
    entry_points={
        'console_scripts' : [
            'modulechain = modulechain.entry_point.cli:main_program',
        ]
    },
    install_requires=[
        'attrs>=22.1.0',
        'Jinja2>=3.0.1',
        'pandas>=1.1.5',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
