"""posts/ -- Blog post persistence and ownership-enforced CRUD.

Layer rule: posts/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/.
"""
