"""
Infrastructure layer - everything that talks to the network.

- identity: authentication against the identity service
- http: the authenticated request dispatcher
- storage: real and mock storage clients
"""
