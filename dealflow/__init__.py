"""
DealFlow partner platform project package.

Holds settings, root URL configuration, middleware and the WSGI/ASGI
entry points.
"""
