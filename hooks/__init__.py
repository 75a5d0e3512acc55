# Re-export the public API from hooks.hooks so that
# `from hooks import X` and `import hooks as hooksmod` both work.
from hooks.hooks import (
    HookContext,
    HookResult,
    Hook,
    BEFORE_ASSEMBLY,
    AFTER_ASSEMBLY,
    after_projects_read,
    war_before_assembly,
    war_after_assembly,
    run_hooks,
)

__all__ = [
    "HookContext",
    "HookResult",
    "Hook",
    "BEFORE_ASSEMBLY",
    "AFTER_ASSEMBLY",
    "after_projects_read",
    "war_before_assembly",
    "war_after_assembly",
    "run_hooks",
]
