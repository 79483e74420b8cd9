from setuptools import setup, find_packages

setup(
    name="cby-helper",
    version="0.1.0",
    description="Shipment scanning helper: resolves AWB barcodes to hub, sack and OSA lane",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"cby_helper": ["default_config.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
            "pylint>=2.17.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "cby-helper=cby_helper.__main__:main",
        ]
    },
)
