from .app import app

# Import commands to register them
from .commands import install, check, deps  # noqa: F401

__all__ = ['app', 'main']


def main():
    app()
