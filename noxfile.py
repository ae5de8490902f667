import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "STORAGE_BACKEND",
    "DATABASE_URL",
    "TIMEZONE",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate storage and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    # Tests build their own stores; never seed or touch a real database
    session.env["SEED_DEFAULT_USERS"] = "false"
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "cedoi/", "tests/")
    session.run("black", "cedoi/", "tests/")
    session.run("flake8", "cedoi/", "tests/")
    session.run("mypy", "cedoi/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests against both storage backends.
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_reconciliation.py
    """
    _set_env(session)
    session.install("-e", ".[test]")
    tests = session.posargs or ["tests/unit"]
    session.run(
        "pytest",
        *tests,
        "-m", "unit",
        "-vv",
        "--tb=short",
        "--cov=cedoi",
        "--cov-report=term-missing",
        "--cov-report=html:.nox/htmlcov",
        "--cov-report=xml",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through FastAPI's TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_attendance_api.py
    """
    _set_env(session)
    session.install("-e", ".[test]")
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "-m", "integration",
        "-vv",
        "--tb=short",
    )
