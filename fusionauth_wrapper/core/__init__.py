"""Core client logic, independent of any web framework.

Module Structure:
    - fusionauth/ : FusionAuth REST client (AuthClient and its services)
"""
