"""
High-level use cases for clubstore.

Each service orchestrates repositories to implement business rules
(registration, login, seeding). UI code calls these services and the
repositories instead of touching the keyed store directly.
"""
