"""
Range data module.

Canonical range, content and mark models, plus normalization of raw range
payloads into validated records.
"""
