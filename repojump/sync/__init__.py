"""Remote sync — reconciles the registry with what remotes and the disk report.

This package provides the primitives for:
- Attach: merging remote-discovered repositories into the registry
- Detach: dropping records and their usage history
- Clean: pruning records whose clone directory has disappeared
"""
