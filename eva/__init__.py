"""EVA — UI component evaluation package.

Subpackages:
- scene: Host scene graph (VisualNode variants, Canvas collaborator)
- review: Serializer, prompt assembly, response recovery, annotation projection
- integrations: Outbound HTTP clients (model API, evaluation server)
- plugin: Host-side controller (selection state, panel messages, previews)
"""
