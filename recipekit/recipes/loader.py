"""RecipeLoader — discovers and loads recipe markdown files with YAML frontmatter."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from recipekit.errors import ValidationError

# Filled in by the loader, not the frontmatter
_RESERVED_KEYS = {"body", "path"}


class Recipe(BaseModel):
    """Parsed recipe: frontmatter fields + markdown body."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    kind: str | None = None
    name: str | None = None
    cron_jobs: Any = Field(default=None, alias="cronJobs")
    body: str = ""
    path: Path | None = None


def parse_frontmatter(markdown: str) -> tuple[dict[str, Any], str]:
    """Split recipe markdown into (frontmatter_dict, body).

    Frontmatter must open the file with ``---`` and close with a ``---`` line,
    and must declare an ``id``.
    """
    if not markdown.startswith("---\n"):
        raise ValidationError("Recipe markdown must start with YAML frontmatter (---)")
    end = markdown.find("\n---\n", 4)
    if end == -1:
        raise ValidationError("Recipe frontmatter not terminated (---)")

    try:
        fm = yaml.safe_load(markdown[4:end])
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid recipe frontmatter: {e}") from e
    if not isinstance(fm, dict) or not fm.get("id"):
        raise ValidationError("Recipe frontmatter must include id")
    return fm, markdown[end + 5:]


def load_recipe(path: str | Path) -> Recipe:
    """Load a single recipe file."""
    path = Path(path)
    fm, body = parse_frontmatter(path.read_text(encoding="utf-8"))
    reserved = sorted(_RESERVED_KEYS & fm.keys())
    if reserved:
        raise ValidationError(f"Recipe frontmatter must not declare: {', '.join(reserved)}")
    fm["id"] = str(fm["id"])
    try:
        return Recipe(**fm, body=body, path=path)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid recipe frontmatter: {e}") from e


class RecipeLoader:
    """Loads recipes from builtin and workspace directories.

    Recipe format: {dir}/{id}.md
    Workspace recipes override builtin recipes with the same id.
    """

    def __init__(self, workspace_recipes: Path, builtin_dir: Path | None = None):
        self._workspace_recipes = workspace_recipes
        self._builtin_dir = builtin_dir

    def discover(self) -> list[Recipe]:
        """Find all recipes (builtin + workspace, workspace overrides)."""
        recipes: dict[str, Recipe] = {}

        if self._builtin_dir is not None:
            for recipe in self._scan_dir(self._builtin_dir):
                recipes[recipe.id] = recipe

        for recipe in self._scan_dir(self._workspace_recipes):
            recipes[recipe.id] = recipe

        return sorted(recipes.values(), key=lambda r: r.id)

    def get(self, recipe_id: str) -> Recipe | None:
        for recipe in self.discover():
            if recipe.id == recipe_id:
                return recipe
        return None

    def _scan_dir(self, base: Path) -> list[Recipe]:
        results: list[Recipe] = []
        if not base.is_dir():
            return results
        for child in sorted(base.glob("*.md")):
            try:
                results.append(load_recipe(child))
            except (ValidationError, OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to parse recipe {child}: {e}")
        return results
