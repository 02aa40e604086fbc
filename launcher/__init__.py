"""Launcher - settings store, usage history and one-shot legacy migration."""

from config.project import get_project

__version__ = get_project().version
__author__ = "Launcher Contributors"

# No package-level imports - use absolute imports instead
