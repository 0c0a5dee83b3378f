from setuptools import find_packages, setup

setup(
    name="ukeyring",
    version="1.0.0",
    description="Idempotent GPG key installer",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.11",
    install_requires=['zenlib>=1.2.0', 'requests>=2.25.0'],
    entry_points={
        "console_scripts": [
            "ukeyring = ukeyring.main:main"
        ]
    }
)
