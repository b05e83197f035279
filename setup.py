# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="mvnexplorer",
    version="0.3.0",
    description="Explorador de proyectos Maven: descubre pom.xml, muestra módulos y ejecuta goals",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["mvnexplorer", "mvnexplorer.*"]),
    package_data={
        "mvnexplorer": ["resources/*.xml"],
    },
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'mvnexplorer=mvnexplorer.main:main',  # CLI del explorador
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
