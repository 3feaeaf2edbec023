"""
Console QA Dashboard web application.

Usage:
    python -m console_qa web
"""
from .app import create_app

__all__ = ["create_app"]
