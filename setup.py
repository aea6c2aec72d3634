from pathlib import Path
from setuptools import setup, find_packages


def read_requirements(filename):
    with open(filename) as f:
        return [req for req in (req.partition('#')[0].strip() for req in f) if req]


setup(
    name='oktasdk',
    description='Okta management API client.',
    long_description=Path('README.rst').read_text(),
    long_description_content_type='text/x-rst',
    use_scm_version={'fallback_version': '0.1.0'},
    setup_requires=['setuptools_scm'],
    license='Apache-2.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=read_requirements('requirements.in'),
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
            'responses',
        ],
    },
    entry_points={
        'oktasdk.resource_factory': [
            'oktasdk = oktasdk.resources:RESOURCE_FACTORY_CONFIG',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.8',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: System :: Systems Administration :: Authentication/Directory',
    ],
)
