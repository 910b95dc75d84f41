from setuptools import find_packages, setup

package_name = "boustrophedon_explorer"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    python_requires=">=3.8",
    install_requires=[
        "setuptools",
        "numpy",
        "opencv-python-headless",
        "matplotlib",
    ],
    zip_safe=True,
    description="Boustrophedon cell decomposition and full coverage path planning "
    "for a robot field of view",
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "coverage_demo = boustrophedon_explorer.demo:main",
        ],
    },
)
