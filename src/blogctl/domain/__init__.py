"""Domain layer — front-matter models, URL rules, and page dispatch.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
