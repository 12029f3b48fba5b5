"""
Service layer.

Routers stay thin: they parse the request, resolve dependencies from
``deps`` and call one function here. Services raise ``TelloomError``
subclasses that the exception handlers turn into responses.
"""
