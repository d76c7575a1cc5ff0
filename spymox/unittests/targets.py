"""Module-level callables used as interception targets in tests."""

from __future__ import annotations


def greet(name: str) -> str:
    return f"hello {name}"


def shout(name: str) -> str:
    return greet(name).upper()


class Greeter:
    prefix = "hi"

    @staticmethod
    def render(name: str) -> str:
        return f"{Greeter.prefix} {name}"


class PoliteGreeter(Greeter):
    pass
