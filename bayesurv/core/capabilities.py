"""
Capability string constants for bayesurv.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from bayesurv.core.capabilities import CAPABILITY_PARTITIONED

    if design.supports(CAPABILITY_PARTITIONED):
        t_unc = design.uncensored_time
"""

# Data can be returned as full numpy arrays in memory
CAPABILITY_MATERIALIZED = 'materialized'

# Data can be iterated multiple times
CAPABILITY_REPEATABLE = 'repeatable'

# Observations are pre-split into uncensored / censored groups
CAPABILITY_PARTITIONED = 'partitioned'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_PARTITIONED,
})

__all__ = [
    'CAPABILITY_MATERIALIZED',
    'CAPABILITY_REPEATABLE',
    'CAPABILITY_PARTITIONED',
    'ALL_CAPABILITIES',
]
