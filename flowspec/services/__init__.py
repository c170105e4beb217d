"""Engine services.

This package contains the validation services (flow, domain and system
scopes) and the test derivation services.
"""
