"""
Kernel Layer

The file-backed core every route goes through:
- Document Core (path resolution, filename policy, document store,
  append-only revision history)
- Identity Core (credential store, password hashing, sign-in/sign-up)
- Access Gate (restricted/public classification of request paths)

Invariants:
- Old content is archived before it is overwritten, under the same
  per-document lock
- Restricted actions never touch storage without a signed-in session
"""
