"""recipekit — recipe loading and cron job reconciliation for the host gateway."""

__version__ = "0.1.0"
