"""Main entry point for the template pipeline CLI."""
from .cli import app

if __name__ == "__main__":
    app(prog_name="template-pipeline")
