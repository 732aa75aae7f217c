"""Recipe cron jobs — normalization, mapping store, reconciliation."""

from recipekit.core.cron.consent import ConsentDecision, resolve_consent
from recipekit.core.cron.hashing import hash_spec, stable_stringify
from recipekit.core.cron.mapping import (
    load_mapping_state,
    mapping_state_path,
    save_mapping_state,
)
from recipekit.core.cron.normalize import normalize_cron_jobs, normalize_recipe_cron_jobs
from recipekit.core.cron.reconciler import CronReconciler, reconcile_recipe_cron_jobs
from recipekit.core.cron.registry import CronRegistry, GatewayCronRegistry
from recipekit.core.cron.types import (
    CronInstallMode,
    CronJobSpec,
    MappingEntry,
    MappingState,
    ReconcileOutcome,
    ReconcileResult,
    ReconcileScope,
    RemoteJob,
)

__all__ = [
    "ConsentDecision",
    "CronInstallMode",
    "CronJobSpec",
    "CronReconciler",
    "CronRegistry",
    "GatewayCronRegistry",
    "MappingEntry",
    "MappingState",
    "ReconcileOutcome",
    "ReconcileResult",
    "ReconcileScope",
    "RemoteJob",
    "hash_spec",
    "load_mapping_state",
    "mapping_state_path",
    "normalize_cron_jobs",
    "normalize_recipe_cron_jobs",
    "reconcile_recipe_cron_jobs",
    "resolve_consent",
    "save_mapping_state",
    "stable_stringify",
]
