"""auth/ -- Credential handling for authflow: users, hashing, tokens, service.

Layer rule: auth/ imports only stdlib + third-party libraries.
It does NOT import from api/, client/, or core/.
api/ imports from auth/, not the other way around.
"""
