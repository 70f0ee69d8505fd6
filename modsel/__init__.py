"""modsel: module selection core.

Catalog of modules with dependency edges plus the activation set that keeps
the dependency closure consistent while a user toggles modules on and off.
"""
