from setuptools import setup, find_packages

setup(
    name="template-pipeline",
    version="1.0.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "jinja2>=3.1.2",
        "markupsafe>=2.1.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pyyaml>=6.0",
        "pydantic>=2.0.0,<3.0.0",
        "typing-extensions>=4.0.0",
        "lxml>=4.9.0",
        "htmlmin2>=0.1.13",
        "csscompressor>=0.9.5",
        "jsmin>=3.0.1",
        "packaging>=21.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0"
        ],
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "isort>=5.0",
            "mypy>=1.0"
        ]
    },
    entry_points={
        "console_scripts": [
            "template-pipeline=template_pipeline.cli:app",
        ],
    },
    python_requires=">=3.8",
    description="Loads, minifies, compiles and renders directories of HTML, CSS, JS, JSON and XML templates",
    author="Your Organization",
    author_email="example@example.com",
    url="https://github.com/example/template-pipeline",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
