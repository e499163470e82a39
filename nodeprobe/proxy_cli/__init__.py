from .cli import main_cli, cli_main

__all__ = [
    "main_cli",
    "cli_main"
]
