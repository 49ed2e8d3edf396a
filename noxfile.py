"""Nox sessions for cumstats automation."""

from __future__ import annotations

import pathlib

import nox

REPO_ROOT = pathlib.Path(__file__).parent

nox.options.sessions = ["tests-3.11", "tests-3.12", "lint"]
nox.options.error_on_missing_interpreters = False


def _install_project(session: nox.Session) -> None:
    session.install("-e", f"{REPO_ROOT}[test]")


@nox.session(name="tests-3.11", python="3.11")
def tests_3_11(session: nox.Session) -> None:
    """Run the unit and property suites under Python 3.11."""

    _install_project(session)
    session.run(
        "pytest",
        "tests/unit/",
        "tests/property/",
        env={"PYTHONPATH": str(REPO_ROOT)},
    )


@nox.session(name="tests-3.12", python="3.12")
def tests_3_12(session: nox.Session) -> None:
    """Run the unit and property suites under Python 3.12."""

    _install_project(session)
    session.run(
        "pytest",
        "tests/unit/",
        "tests/property/",
        env={"PYTHONPATH": str(REPO_ROOT)},
    )


@nox.session
def lint(session: nox.Session) -> None:
    """Run linters via ruff and mypy."""

    _install_project(session)
    session.install("ruff", "mypy")
    session.run("ruff", "check", str(REPO_ROOT / "cumstats"), str(REPO_ROOT / "tests"))
    session.run("mypy", "cumstats")
