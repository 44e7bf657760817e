"""
Unit tests for fallback-core.

Test individual components in isolation:
- Backoff calculator (exact values and jitter bounds)
- Policy resolver (layer precedence, field-level fallthrough)
- Provider registry (normalization, capability checks, dispatch)
- Orchestration engine (attempt loop and the three strategies)
- Settings, hooks and data models
"""
