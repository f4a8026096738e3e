"""
Dispatch and refresh module.

Owns the plugin facade, its lifecycle (ACTIVE <-> PAUSED -> DESTROYED),
debounced refresh scheduling and the host calendar collaborator.
"""
