"""Leave & attendance backend.

Feature modules (leave, balances, conflicts, attendance, ...) each follow the
same layering: a thin Flask controller, a service holding the use cases and a
repository protocol with its MySQL implementation.
"""
