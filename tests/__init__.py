"""
Test package for metacat.

- test_sqlscript.py: setup script parsing and execution
- test_schema.py: database creation and migration
- test_schematron_dao.py: schematron rule storage
- test_languages_api.py: application languages endpoints
- test_schematron_api.py: schematron endpoints
- test_settings_api.py: settings endpoints and configuration
- test_security.py: profiles and authentication
"""
