from real_income.hooks import DataObservabilityHooks

HOOKS = (DataObservabilityHooks(),)
