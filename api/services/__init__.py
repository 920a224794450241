"""
API Services Layer.

Async functions over an ``AsyncSession``, one module per resource. Routes
call these; services commit their own work and raise ``core.exceptions``.
"""
