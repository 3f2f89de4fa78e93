"""FusionAuth client wrapper package.

To use the client:
    from fusionauth_wrapper.config import load_settings
    from fusionauth_wrapper.core.fusionauth import AuthClient
"""
