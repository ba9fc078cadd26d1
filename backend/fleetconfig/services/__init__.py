"""Services Layer — orchestration between routes and stores.

Invariants:
    - Services depend on store protocols, never on concrete stores
    - Every template returned to a caller has passed through build_template_view
"""
