"""
Tool adapters.

- git: local repository operations through the ``git`` binary
- github: GitHub REST API
- gitkraken: GitKraken CLI, registered only when ``gk`` is installed
- system: host detection and installers
"""
