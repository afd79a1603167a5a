from setuptools import setup, find_packages

setup(
    name="workshop-dashboard",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"src.dashboard": ["templates/*.html"]},
    include_package_data=True,
    install_requires=[
        "pytest>=8.3.5",
        "pydantic>=2.0.0",
        "fastapi>=0.100.0",
        "httpx>=0.24.0",
        "jinja2>=3.1.0",
        "python-multipart>=0.0.6",
        "itsdangerous>=2.1.0",
        "plotly>=5.0.0",
        "pytz",
    ],
)
