"""
Everything that talks to the Kubernetes API over the network.

The low-level transport (`api`), the errors (`errors`), the authentication
and session contexts (`auth`, `logins`), the URL building (`paths`),
and the operation-specific request execution (`executing`).
"""
