"""
Settings package for Ledger Service.

The module is selected through DJANGO_SETTINGS_MODULE
(config.settings.development, config.settings.testing, ...).
"""
