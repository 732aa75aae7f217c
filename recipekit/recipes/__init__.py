"""Recipe discovery and frontmatter parsing."""

from recipekit.recipes.loader import Recipe, RecipeLoader, load_recipe, parse_frontmatter

__all__ = ["Recipe", "RecipeLoader", "load_recipe", "parse_frontmatter"]
