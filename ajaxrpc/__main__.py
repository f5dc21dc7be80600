"""
Entry point for running ajaxrpc as a module: python -m ajaxrpc
"""

from ajaxrpc.cli.commands import app

if __name__ == "__main__":
    app()
