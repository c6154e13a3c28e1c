"""Built-in CLI sub-commands for specdoc.

* :mod:`~specdoc.commands.inspect` -- ``groups``, ``methods``,
  ``resources``, ``example`` and ``security``, registered directly on the
  root app.
* :mod:`~specdoc.commands.config` -- the ``config`` sub-command group.
"""
