"""python -m recipekit entry point."""

from recipekit.cli.commands import app

if __name__ == "__main__":
    app()
