"""Built-in maru commands: ``generate``, ``inspect`` and the ``config`` group."""
