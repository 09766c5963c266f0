from setuptools import find_packages, setup

setup(
    name="outage-scheduler",
    version="0.1.0",
    packages=find_packages(
        include=[
            "outage_common",
            "outage_common.*",
            "outage_notify",
            "outage_notify.*",
            "outage_admin",
            "outage_admin.*",
        ]
    ),
    install_requires=[
        "click>=8.1.0",
        "tzdata>=2024.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-xdist>=3.3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "outage-admin=outage_admin.cli:main",
        ],
    },
    python_requires=">=3.11",
)
