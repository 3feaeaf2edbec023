"""
Entry point for running console_qa as a module.

Usage:
    $ python -m console_qa run
    $ python -m console_qa dashboard
    $ python -m console_qa pipeline --publish --timeout 1800
    $ python -m console_qa version
"""
from .main import run_cli

if __name__ == "__main__":
    run_cli()
