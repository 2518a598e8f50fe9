"""
Clients for the generative language API.
"""
