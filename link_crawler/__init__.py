"""
LinkCrawler package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; `link_crawler.cli` stays the module
from link_crawler.cli import cli as main_cli  # noqa: E402
