from setuptools import setup, find_packages

setup(
    name="healthmap",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "passlib[bcrypt]",
        # passlib's bcrypt backend probe breaks on bcrypt>=4.1
        "bcrypt==4.0.1",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
