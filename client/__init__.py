"""client/ -- Login, signup and logout for applications talking to the authflow API.

Layer rule: client/ reaches the server over HTTP only. It does NOT import
from api/ or auth/.
"""
