"""Built-in CLI sub-commands for actionscli.

* :mod:`~actionscli.commands.build` -- generate and compile standalone
  programs from an application document.

The interpreter command (``actionscli run``) lives on the root app in
:mod:`actionscli.app`.
"""
