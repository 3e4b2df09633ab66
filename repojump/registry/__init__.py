"""Registry — the persistent set of known repository clones.

The registry package provides:
- Models: repository records keyed by (remote, qualified name)
- Store: versioned binary snapshots with atomic replacement
- Lock: a workspace-scoped mutex around load -> mutate -> save
"""
