"""
Client update distribution and release rollout control.

- versioning: numeric per-segment version comparison
- resolver: latest published release per platform
- lifecycle: draft / published / deprecated management
- update_check: client check-update decisions
- routes: HTTP endpoints under /api
"""
