"""
Services layer for AI Meta Description business logic.

MODULES:
- ai/: provider adapters, registry, gateway and provider settings

STANDALONE SERVICES:
- options: prefixed key-value options store
- descriptions: per-post and front page meta descriptions
"""
